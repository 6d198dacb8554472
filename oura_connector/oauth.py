"""OAuth 2.0 utilities for the Oura authorization code flow."""

from typing import Any
from urllib.parse import urlencode

import httpx

from .exceptions import APIError, OAuthError, RateLimitError
from .http_client import DEFAULT_TIMEOUT, parse_retry_after
from .vendor_types import API_URLS, OAuthTokens

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


class OAuthHandler:
    """
    Handles the OAuth 2.0 authorization code flow against Oura.

    Supports:
    - Authorization URL generation
    - Code exchange for tokens
    - Token refresh
    - Token revocation

    Tokens are returned to the caller and never stored here.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        auth_url: str = API_URLS.OAUTH_AUTHORIZE,
        token_url: str = API_URLS.OAUTH_TOKEN,
        revoke_url: str = API_URLS.OAUTH_REVOKE,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.auth_url = auth_url
        self.token_url = token_url
        self.revoke_url = revoke_url

        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)

    def build_authorization_url(self, scopes: list[str], state: str | None = None) -> str:
        """
        Build OAuth authorization URL.

        Args:
            scopes: List of OAuth scopes (e.g. ``personal``, ``daily``)
            state: State parameter; the caller generates it for CSRF
                protection, an empty value is sent when omitted

        Returns:
            Full authorization URL
        """
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(scopes),
            "state": state or "",
        }
        return f"{self.auth_url}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> OAuthTokens:
        """
        Exchange authorization code for access token.

        Args:
            code: Authorization code from the redirect

        Returns:
            OAuthTokens with access and refresh tokens

        Raises:
            OAuthError: If exchange fails
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        return await self._request_token(data, "Failed to exchange code for token.")

    async def refresh_token(self, refresh_token: str) -> OAuthTokens:
        """
        Refresh an expired access token.

        Args:
            refresh_token: Refresh token from a previous exchange

        Returns:
            OAuthTokens with new access token

        Raises:
            OAuthError: If refresh fails
        """
        data = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        return await self._request_token(data, "Failed to refresh token.")

    async def revoke_token(self, token: str) -> bool:
        """
        Revoke an access token.

        Returns:
            True if revocation succeeded

        Raises:
            OAuthError: If revocation fails
        """
        try:
            response = await self.http_client.post(
                self.revoke_url,
                params={"access_token": token},
            )
        except httpx.RequestError as e:
            raise APIError(
                f"Network error during token revocation: {e}",
                status_code=0,
                url=self.revoke_url,
                method="POST",
            ) from e

        if not response.is_success:
            raise self._error(response, "Failed to revoke token.", self.revoke_url)
        return True

    async def _request_token(self, data: dict[str, str], failure_message: str) -> OAuthTokens:
        try:
            response = await self.http_client.post(
                self.token_url,
                data=data,
                headers=FORM_HEADERS,
            )
        except httpx.RequestError as e:
            raise APIError(
                f"Network error during token request: {e}",
                status_code=0,
                url=self.token_url,
                method="POST",
            ) from e

        if not response.is_success:
            raise self._error(response, failure_message, self.token_url)

        try:
            body = response.json()
        except ValueError as e:
            raise OAuthError(
                f"{failure_message} Invalid JSON in response.",
                status_code=response.status_code,
                status_text=response.reason_phrase,
                detail=response.text,
                url=self.token_url,
                method="POST",
            ) from e

        return self._parse_token_response(body)

    @staticmethod
    def _error(response: httpx.Response, message: str, url: str) -> APIError:
        if response.status_code == 429:
            return RateLimitError(
                message,
                status_code=429,
                status_text=response.reason_phrase,
                detail=response.text,
                url=url,
                method="POST",
                retry_after=parse_retry_after(response),
            )
        return OAuthError(
            message,
            status_code=response.status_code,
            status_text=response.reason_phrase,
            detail=response.text,
            url=url,
            method="POST",
        )

    @staticmethod
    def _parse_token_response(data: dict[str, Any]) -> OAuthTokens:
        if not isinstance(data, dict) or not data.get("access_token"):
            raise OAuthError("Missing access_token in response")
        return OAuthTokens.from_response(data)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._owns_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "OAuthHandler":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
