"""Oura Connector - async client for the Oura Ring API v2."""

from .auth import (
    AuthStrategy,
    OAuthAuth,
    SandboxAuth,
    StaticTokenAuth,
    WebhookAuth,
    resolve_auth,
)
from .client import Oura, OuraClient, OuraOAuth
from .config import OuraSettings
from .exceptions import (
    APIError,
    ErrorKind,
    MissingClientIdError,
    MissingClientSecretError,
    MissingCredentialError,
    MissingRedirectUriError,
    MissingTokenError,
    OAuthError,
    OuraError,
    RateLimitError,
    ValidationError,
    WebhookError,
)
from .http_client import RequestExecutor
from .oauth import OAuthHandler
from .pagination import fetch_all, iter_pages
from .vendor_types import (
    API_URLS,
    DataType,
    ErrorDetail,
    EventType,
    OAuthTokens,
    RequestDescriptor,
    Resource,
    Subscription,
    WebhookEvent,
)
from .webhooks import WebhookClient, WebhookVerifier, parse_event, verify_challenge

__version__ = "0.1.0"

__all__ = [
    "Oura",
    "OuraClient",
    "OuraOAuth",
    "OuraSettings",
    "WebhookClient",
    "WebhookVerifier",
    "verify_challenge",
    "parse_event",
    "OAuthHandler",
    "RequestExecutor",
    "fetch_all",
    "iter_pages",
    "AuthStrategy",
    "StaticTokenAuth",
    "SandboxAuth",
    "OAuthAuth",
    "WebhookAuth",
    "resolve_auth",
    "OuraError",
    "ErrorKind",
    "MissingCredentialError",
    "MissingTokenError",
    "MissingClientIdError",
    "MissingClientSecretError",
    "MissingRedirectUriError",
    "ValidationError",
    "APIError",
    "RateLimitError",
    "OAuthError",
    "WebhookError",
    "API_URLS",
    "Resource",
    "EventType",
    "DataType",
    "RequestDescriptor",
    "ErrorDetail",
    "OAuthTokens",
    "Subscription",
    "WebhookEvent",
]
