"""Endpoint constants, enums, and Pydantic models for the Oura API."""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class API_URLS:
    """Fixed Oura endpoints."""

    BASE_V2 = "https://api.ouraring.com/v2/usercollection/"
    BASE_V2_SANDBOX = "https://api.ouraring.com/v2/sandbox/usercollection/"
    WEBHOOK = "https://api.ouraring.com/v2/webhook/"

    OAUTH_AUTHORIZE = "https://cloud.ouraring.com/oauth/authorize"
    OAUTH_TOKEN = "https://api.ouraring.com/oauth/token"
    OAUTH_REVOKE = "https://api.ouraring.com/oauth/revoke"


# Query parameters validated as ISO 8601 before a request is sent
DATE_PARAMS = ("start_date", "end_date", "start_datetime", "end_datetime")


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class Resource(str, Enum):
    """usercollection endpoints."""

    DAILY_ACTIVITY = "daily_activity"
    DAILY_CARDIOVASCULAR_AGE = "daily_cardiovascular_age"
    DAILY_READINESS = "daily_readiness"
    DAILY_RESILIENCE = "daily_resilience"
    DAILY_SLEEP = "daily_sleep"
    DAILY_SPO2 = "daily_spo2"
    DAILY_STRESS = "daily_stress"
    ENHANCED_TAG = "enhanced_tag"
    HEARTRATE = "heartrate"
    PERSONAL_INFO = "personal_info"
    REST_MODE_PERIOD = "rest_mode_period"
    RING_CONFIGURATION = "ring_configuration"
    SESSION = "session"
    SLEEP = "sleep"
    SLEEP_TIME = "sleep_time"
    TAG = "tag"
    VO2_MAX = "vO2_max"
    WORKOUT = "workout"


class EventType(str, Enum):
    """Webhook subscription event types."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class DataType(str, Enum):
    """Webhook subscription data types."""

    TAG = "tag"
    ENHANCED_TAG = "enhanced_tag"
    WORKOUT = "workout"
    SESSION = "session"
    SLEEP = "sleep"
    DAILY_SLEEP = "daily_sleep"
    DAILY_READINESS = "daily_readiness"
    DAILY_ACTIVITY = "daily_activity"
    DAILY_SPO2 = "daily_spo2"
    SLEEP_TIME = "sleep_time"
    REST_MODE_PERIOD = "rest_mode_period"
    RING_CONFIGURATION = "ring_configuration"
    DAILY_STRESS = "daily_stress"
    DAILY_CYCLE_PHASES = "daily_cycle_phases"


class RequestDescriptor(BaseModel):
    """Everything needed to issue one HTTP call."""

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod = HTTPMethod.GET
    path: str
    params: dict[str, str] | None = None
    body: dict[str, Any] | None = None

    def with_params(self, params: dict[str, str] | None) -> "RequestDescriptor":
        """Return a copy of this descriptor with a different query string."""
        return self.model_copy(update={"params": params})


class ErrorDetail(BaseModel):
    """Failed HTTP exchange, as carried by API errors."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    status_text: str
    detail: str
    url: str
    method: str


class OAuthTokens(BaseModel):
    """OAuth token set returned by the Oura token endpoint."""

    access_token: str
    refresh_token: str | None = None
    expires_in: int = 0  # seconds
    expires_at: datetime | None = None
    token_type: str = "bearer"
    scope: str | None = None

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "OAuthTokens":
        """Build tokens from a token endpoint body, computing ``expires_at``."""
        expires_in = int(data.get("expires_in") or 0)
        expires_at = None
        if expires_in:
            expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_in=expires_in,
            expires_at=expires_at,
            token_type=data.get("token_type", "bearer"),
            scope=data.get("scope"),
        )

    @property
    def scopes(self) -> list[str]:
        return self.scope.split() if self.scope else []

    def is_expired(self) -> bool:
        """Check if access token has expired."""
        if not self.expires_at:
            return False
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) >= expires_at


class Subscription(BaseModel):
    """Webhook subscription as returned by the Oura webhook API."""

    model_config = ConfigDict(extra="allow")

    id: str
    callback_url: str
    event_type: str
    data_type: str
    expiration_time: str | None = None


class WebhookEvent(BaseModel):
    """Notification delivered to a subscription's callback URL."""

    model_config = ConfigDict(extra="allow")

    event_type: str
    data_type: str
    object_id: str | int | None = None
    event_time: datetime | None = None
    user_id: str | int | None = None
    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
