"""Environment configuration for command-line and service use."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

from .auth import OAuthAuth, WebhookAuth, resolve_auth
from .client import OuraClient, OuraOAuth
from .http_client import DEFAULT_TIMEOUT, RequestExecutor
from .webhooks import WebhookClient

ENV_FILES = (Path(".env.local"), Path(".env"))

TRUTHY = {"1", "true", "yes", "on"}


def load_env_file(env_files: tuple[Path, ...] = ENV_FILES) -> Path | None:
    """Load the first existing env file; variables already set win."""
    for env_file in env_files:
        if env_file.exists():
            load_dotenv(env_file, override=False)
            return env_file
    return None


class OuraSettings(BaseModel):
    """Oura credentials and client options."""

    access_token: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    redirect_uri: str | None = None
    use_sandbox: bool = False
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, load_files: bool = True) -> "OuraSettings":
        """
        Read settings from ``OURA_*`` environment variables.

        Variables:
        - OURA_ACCESS_TOKEN - personal access token
        - OURA_CLIENT_ID / OURA_CLIENT_SECRET - OAuth application
        - OURA_REDIRECT_URI - OAuth callback URL
        - OURA_USE_SANDBOX - ``true`` to use the sandbox
        - OURA_TIMEOUT - request timeout in seconds
        """
        if load_files:
            load_env_file()

        return cls(
            access_token=os.getenv("OURA_ACCESS_TOKEN") or None,
            client_id=os.getenv("OURA_CLIENT_ID") or None,
            client_secret=os.getenv("OURA_CLIENT_SECRET") or None,
            redirect_uri=os.getenv("OURA_REDIRECT_URI") or None,
            use_sandbox=os.getenv("OURA_USE_SANDBOX", "false").lower() in TRUTHY,
            timeout=float(os.getenv("OURA_TIMEOUT") or DEFAULT_TIMEOUT),
        )

    def _executor(self) -> RequestExecutor:
        return RequestExecutor(timeout=self.timeout)

    # The builders check credentials before an executor (and its connection
    # pool) exists, so a missing credential leaves nothing to close.
    def build_client(self, use_sandbox: bool | None = None) -> OuraClient:
        """Token or sandbox client; ``use_sandbox`` overrides the setting."""
        sandbox = self.use_sandbox if use_sandbox is None else use_sandbox
        auth = resolve_auth(self.access_token, use_sandbox=sandbox)
        return OuraClient(auth, executor=self._executor())

    def build_oauth_client(self) -> OuraOAuth:
        OAuthAuth(self.client_id, self.client_secret, self.redirect_uri)
        return OuraOAuth(
            self.client_id,
            self.client_secret,
            self.redirect_uri,
            use_sandbox=self.use_sandbox,
            executor=self._executor(),
        )

    def build_webhook_client(self) -> WebhookClient:
        WebhookAuth(self.client_id, self.client_secret)
        return WebhookClient(self.client_id, self.client_secret, executor=self._executor())
