"""Oura API v2 client: one method per usercollection resource."""

import logging
import warnings
from datetime import date
from typing import Any

from .auth import AuthStrategy, OAuthAuth, resolve_auth
from .http_client import RequestExecutor
from .oauth import OAuthHandler
from .pagination import fetch_all
from .vendor_types import OAuthTokens, RequestDescriptor, Resource

logger = logging.getLogger(__name__)

DateLike = str | date

TAG_DEPRECATION = "Tag is deprecated. We recommend transitioning to Enhanced Tag."


def to_iso(value: DateLike) -> str:
    """Render a date, datetime or pre-formatted string for a query parameter."""
    if isinstance(value, date):
        return value.isoformat()
    return value


def _warn_if_deprecated(resource: Resource) -> None:
    # Attributed to the code calling the public OuraClient method.
    if resource is Resource.TAG:
        warnings.warn(TAG_DEPRECATION, DeprecationWarning, stacklevel=4)


class OuraClient:
    """
    Oura API v2 client.

    The client does not know how it is authenticated: the injected
    ``AuthStrategy`` supplies the base URL and credential headers for every
    request. List endpoints are walked to the last page; document endpoints
    return a single dict.

    Every data method takes an optional ``access_token``. Only OAuth clients
    need it; token and sandbox clients ignore it.
    """

    def __init__(self, auth: AuthStrategy, executor: RequestExecutor | None = None):
        self.auth = auth
        self.executor = executor or RequestExecutor()

    async def _fetch(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
        access_token: str | None = None,
    ) -> Any:
        headers = self.auth.auth_headers(access_token)
        descriptor = RequestDescriptor(path=endpoint, params=params)
        logger.debug("Fetching %s with params=%s", endpoint, params)
        return await fetch_all(self.executor, descriptor, self.auth.base_url(), headers)

    # Every public method awaits these directly; the warning stacklevel depends on it.
    async def _documents(
        self,
        resource: Resource | str,
        start_date: DateLike,
        end_date: DateLike,
        access_token: str | None,
    ) -> list[dict[str, Any]]:
        resource = Resource(resource)
        _warn_if_deprecated(resource)
        params = {"start_date": to_iso(start_date), "end_date": to_iso(end_date)}
        return await self._fetch(resource.value, params, access_token)

    async def _document(
        self,
        resource: Resource | str,
        document_id: str,
        access_token: str | None,
    ) -> dict[str, Any]:
        resource = Resource(resource)
        _warn_if_deprecated(resource)
        return await self._fetch(f"{resource.value}/{document_id}", None, access_token)

    async def get_documents(
        self,
        resource: Resource | str,
        start_date: DateLike,
        end_date: DateLike,
        access_token: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch every document of a date-ranged resource."""
        return await self._documents(resource, start_date, end_date, access_token)

    async def get_document(
        self,
        resource: Resource | str,
        document_id: str,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """Fetch a single document of a resource by id."""
        return await self._document(resource, document_id, access_token)

    # ============================================================================
    # Daily summaries
    # ============================================================================

    async def get_daily_activity_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        """Fetch daily activity summaries for a date range."""
        return await self._documents(Resource.DAILY_ACTIVITY, start_date, end_date, access_token)

    async def get_daily_activity(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        """Fetch one daily activity document."""
        return await self._document(Resource.DAILY_ACTIVITY, document_id, access_token)

    async def get_daily_cardiovascular_age_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._documents(
            Resource.DAILY_CARDIOVASCULAR_AGE, start_date, end_date, access_token
        )

    async def get_daily_cardiovascular_age(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        return await self._document(Resource.DAILY_CARDIOVASCULAR_AGE, document_id, access_token)

    async def get_daily_readiness_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        """Fetch daily readiness summaries for a date range."""
        return await self._documents(Resource.DAILY_READINESS, start_date, end_date, access_token)

    async def get_daily_readiness(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        return await self._document(Resource.DAILY_READINESS, document_id, access_token)

    async def get_daily_resilience_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._documents(Resource.DAILY_RESILIENCE, start_date, end_date, access_token)

    async def get_daily_resilience(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        return await self._document(Resource.DAILY_RESILIENCE, document_id, access_token)

    async def get_daily_sleep_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        """Fetch daily sleep scores for a date range."""
        return await self._documents(Resource.DAILY_SLEEP, start_date, end_date, access_token)

    async def get_daily_sleep(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        return await self._document(Resource.DAILY_SLEEP, document_id, access_token)

    async def get_daily_spo2_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._documents(Resource.DAILY_SPO2, start_date, end_date, access_token)

    async def get_daily_spo2(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        return await self._document(Resource.DAILY_SPO2, document_id, access_token)

    async def get_daily_stress_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._documents(Resource.DAILY_STRESS, start_date, end_date, access_token)

    async def get_daily_stress(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        return await self._document(Resource.DAILY_STRESS, document_id, access_token)

    # ============================================================================
    # Sleep, sessions and workouts
    # ============================================================================

    async def get_sleep_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        """Fetch detailed sleep periods for a date range."""
        return await self._documents(Resource.SLEEP, start_date, end_date, access_token)

    async def get_sleep(self, document_id: str, access_token: str | None = None) -> dict[str, Any]:
        return await self._document(Resource.SLEEP, document_id, access_token)

    async def get_sleep_time_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        """Fetch bedtime recommendations for a date range."""
        return await self._documents(Resource.SLEEP_TIME, start_date, end_date, access_token)

    async def get_sleep_time(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        return await self._document(Resource.SLEEP_TIME, document_id, access_token)

    async def get_daily_session_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        """Fetch guided and unguided sessions for a date range."""
        return await self._documents(Resource.SESSION, start_date, end_date, access_token)

    async def get_daily_session(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        return await self._document(Resource.SESSION, document_id, access_token)

    async def get_workout_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        """Fetch workouts for a date range."""
        return await self._documents(Resource.WORKOUT, start_date, end_date, access_token)

    async def get_workout(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        return await self._document(Resource.WORKOUT, document_id, access_token)

    async def get_vo2_max_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._documents(Resource.VO2_MAX, start_date, end_date, access_token)

    async def get_vo2_max(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        return await self._document(Resource.VO2_MAX, document_id, access_token)

    # ============================================================================
    # Tags
    # ============================================================================

    async def get_enhanced_tag_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._documents(Resource.ENHANCED_TAG, start_date, end_date, access_token)

    async def get_enhanced_tag(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        return await self._document(Resource.ENHANCED_TAG, document_id, access_token)

    async def get_tag_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        """Fetch tags for a date range. Deprecated, use enhanced tags."""
        return await self._documents(Resource.TAG, start_date, end_date, access_token)

    async def get_tag(self, document_id: str, access_token: str | None = None) -> dict[str, Any]:
        """Fetch one tag. Deprecated, use enhanced tags."""
        return await self._document(Resource.TAG, document_id, access_token)

    # ============================================================================
    # Ring and account
    # ============================================================================

    async def get_rest_mode_period_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._documents(Resource.REST_MODE_PERIOD, start_date, end_date, access_token)

    async def get_rest_mode_period(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        return await self._document(Resource.REST_MODE_PERIOD, document_id, access_token)

    async def get_ring_configuration_documents(
        self, start_date: DateLike, end_date: DateLike, access_token: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._documents(
            Resource.RING_CONFIGURATION, start_date, end_date, access_token
        )

    async def get_ring_configuration(
        self, document_id: str, access_token: str | None = None
    ) -> dict[str, Any]:
        return await self._document(Resource.RING_CONFIGURATION, document_id, access_token)

    async def get_heartrate(
        self,
        start_datetime: DateLike,
        end_datetime: DateLike,
        access_token: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch heart rate samples between two timestamps.

        Heart rate has no document form; the range is given as ISO 8601
        datetimes rather than dates.
        """
        params = {
            "start_datetime": to_iso(start_datetime),
            "end_datetime": to_iso(end_datetime),
        }
        return await self._fetch(Resource.HEARTRATE.value, params, access_token)

    async def get_personal_info(self, access_token: str | None = None) -> dict[str, Any]:
        """Fetch the user's personal info (single document, no parameters)."""
        return await self._fetch(Resource.PERSONAL_INFO.value, None, access_token)

    # ============================================================================
    # Utility Methods
    # ============================================================================

    async def close(self) -> None:
        """Close HTTP connections."""
        await self.executor.close()

    async def __aenter__(self) -> "OuraClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


class Oura(OuraClient):
    """
    Client for a personal access token or the sandbox.

    Raises:
        MissingTokenError: If no token is given and ``use_sandbox`` is False
    """

    def __init__(
        self,
        access_token: str | None = None,
        use_sandbox: bool = False,
        executor: RequestExecutor | None = None,
    ):
        super().__init__(resolve_auth(access_token, use_sandbox), executor)


class OuraOAuth(OuraClient):
    """
    Client for an OAuth2 application.

    Data methods need the user's ``access_token`` on every call. The OAuth
    flow methods wrap ``OAuthHandler``; the caller keeps and refreshes tokens.
    """

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        redirect_uri: str | None,
        use_sandbox: bool = False,
        executor: RequestExecutor | None = None,
    ):
        auth = OAuthAuth(client_id, client_secret, redirect_uri, use_sandbox=use_sandbox)
        super().__init__(auth, executor)
        self.oauth_handler = OAuthHandler(
            client_id=auth.client_id,
            client_secret=auth.client_secret,
            redirect_uri=auth.redirect_uri,
            http_client=self.executor.http_client,
        )

    def generate_auth_url(self, scopes: list[str], state: str | None = None) -> str:
        """Build the authorization URL the user is sent to."""
        return self.oauth_handler.build_authorization_url(scopes, state)

    async def exchange_code_for_token(self, code: str) -> OAuthTokens:
        return await self.oauth_handler.exchange_code(code)

    async def refresh_access_token(self, refresh_token: str) -> OAuthTokens:
        return await self.oauth_handler.refresh_token(refresh_token)

    async def revoke_access_token(self, access_token: str) -> bool:
        return await self.oauth_handler.revoke_token(access_token)
