"""
Authentication strategies.

A strategy answers two questions for every request: which base URL to talk
to, and which credential headers to send. The facades receive a strategy at
construction time and never look at the credential themselves.

Variants:
- StaticTokenAuth - personal access token, production API
- SandboxAuth - Oura sandbox, no credential
- OAuthAuth - OAuth2 application; the user token is supplied per call
- WebhookAuth - client id/secret headers for the webhook API
"""

from typing import Protocol, runtime_checkable

from .exceptions import (
    MissingClientIdError,
    MissingClientSecretError,
    MissingRedirectUriError,
    MissingTokenError,
)
from .vendor_types import API_URLS


@runtime_checkable
class AuthStrategy(Protocol):
    """Supplies the base URL and credential headers for a request."""

    def base_url(self) -> str:
        ...

    def auth_headers(self, access_token: str | None = None) -> dict[str, str]:
        ...


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class StaticTokenAuth:
    """Personal access token fixed for the lifetime of the client."""

    def __init__(self, token: str | None):
        if not token:
            raise MissingTokenError()
        self._token = token

    def base_url(self) -> str:
        return API_URLS.BASE_V2

    def auth_headers(self, access_token: str | None = None) -> dict[str, str]:
        # Per-call tokens are ignored; the client owns its token.
        return bearer(self._token)

    def __repr__(self) -> str:
        return "StaticTokenAuth(token=***)"


class SandboxAuth:
    """Oura sandbox; serves sample data and needs no credential."""

    def base_url(self) -> str:
        return API_URLS.BASE_V2_SANDBOX

    def auth_headers(self, access_token: str | None = None) -> dict[str, str]:
        return {}

    def __repr__(self) -> str:
        return "SandboxAuth()"


class OAuthAuth:
    """
    OAuth2 application credentials.

    Holds the client id, secret and redirect URI only. User access tokens are
    short-lived and refreshed by the caller, so each data request must carry
    one explicitly.
    """

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        redirect_uri: str | None,
        use_sandbox: bool = False,
    ):
        if not client_id:
            raise MissingClientIdError()
        if not client_secret:
            raise MissingClientSecretError()
        if not redirect_uri:
            raise MissingRedirectUriError()

        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.use_sandbox = use_sandbox

    def base_url(self) -> str:
        return API_URLS.BASE_V2_SANDBOX if self.use_sandbox else API_URLS.BASE_V2

    def auth_headers(self, access_token: str | None = None) -> dict[str, str]:
        if not access_token:
            raise MissingTokenError()
        return bearer(access_token)

    def __repr__(self) -> str:
        return f"OAuthAuth(client_id={self.client_id!r}, redirect_uri={self.redirect_uri!r})"


class WebhookAuth:
    """Client id/secret header pair used by the webhook subscription API."""

    def __init__(self, client_id: str | None, client_secret: str | None):
        if not client_id:
            raise MissingClientIdError()
        if not client_secret:
            raise MissingClientSecretError()

        self.client_id = client_id
        self.client_secret = client_secret

    def base_url(self) -> str:
        return API_URLS.WEBHOOK

    def auth_headers(self, access_token: str | None = None) -> dict[str, str]:
        return {
            "x-client-id": self.client_id,
            "x-client-secret": self.client_secret,
        }

    def __repr__(self) -> str:
        return f"WebhookAuth(client_id={self.client_id!r})"


def resolve_auth(access_token: str | None = None, use_sandbox: bool = False) -> AuthStrategy:
    """
    Pick the strategy for a token-based client.

    Args:
        access_token: Personal access token (ignored in sandbox mode)
        use_sandbox: Use the Oura sandbox environment

    Returns:
        SandboxAuth or StaticTokenAuth

    Raises:
        MissingTokenError: If no token is given outside sandbox mode
    """
    if use_sandbox:
        return SandboxAuth()
    return StaticTokenAuth(access_token)
