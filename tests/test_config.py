"""Tests for environment configuration."""

from unittest.mock import patch

import pytest

from oura_connector.auth import OAuthAuth, SandboxAuth, StaticTokenAuth
from oura_connector.config import OuraSettings, load_env_file
from oura_connector.exceptions import MissingClientIdError, MissingTokenError

OURA_VARS = (
    "OURA_ACCESS_TOKEN",
    "OURA_CLIENT_ID",
    "OURA_CLIENT_SECRET",
    "OURA_REDIRECT_URI",
    "OURA_USE_SANDBOX",
    "OURA_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Start every test with no OURA_* variables and no env files in reach."""
    for name in OURA_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestFromEnv:
    def test_defaults(self):
        settings = OuraSettings.from_env(load_files=False)

        assert settings.access_token is None
        assert settings.use_sandbox is False
        assert settings.timeout == 30.0

    def test_reads_variables(self, monkeypatch):
        monkeypatch.setenv("OURA_ACCESS_TOKEN", "pat")
        monkeypatch.setenv("OURA_CLIENT_ID", "client")
        monkeypatch.setenv("OURA_CLIENT_SECRET", "secret")
        monkeypatch.setenv("OURA_REDIRECT_URI", "https://app.example.com/callback")
        monkeypatch.setenv("OURA_USE_SANDBOX", "TRUE")
        monkeypatch.setenv("OURA_TIMEOUT", "5")

        settings = OuraSettings.from_env(load_files=False)

        assert settings.access_token == "pat"
        assert settings.client_id == "client"
        assert settings.client_secret == "secret"
        assert settings.redirect_uri == "https://app.example.com/callback"
        assert settings.use_sandbox is True
        assert settings.timeout == 5.0

    def test_empty_values_are_unset(self, monkeypatch):
        monkeypatch.setenv("OURA_ACCESS_TOKEN", "")

        assert OuraSettings.from_env(load_files=False).access_token is None

    def test_env_file_loaded(self, monkeypatch, tmp_path):
        (tmp_path / ".env").write_text("OURA_ACCESS_TOKEN=from-file\n")

        settings = OuraSettings.from_env()

        assert settings.access_token == "from-file"
        monkeypatch.delenv("OURA_ACCESS_TOKEN")

    def test_environment_wins_over_file(self, monkeypatch, tmp_path):
        (tmp_path / ".env").write_text("OURA_ACCESS_TOKEN=from-file\n")
        monkeypatch.setenv("OURA_ACCESS_TOKEN", "from-env")

        assert OuraSettings.from_env().access_token == "from-env"

    def test_local_file_preferred(self, monkeypatch, tmp_path):
        (tmp_path / ".env").write_text("OURA_CLIENT_ID=shared\n")
        (tmp_path / ".env.local").write_text("OURA_CLIENT_ID=local\n")

        assert load_env_file().name == ".env.local"
        assert OuraSettings.from_env(load_files=False).client_id == "local"
        monkeypatch.delenv("OURA_CLIENT_ID")

    def test_no_env_file(self):
        assert load_env_file() is None


class TestBuilders:
    def test_build_client_with_token(self):
        client = OuraSettings(access_token="pat", timeout=5).build_client()

        assert isinstance(client.auth, StaticTokenAuth)
        assert client.executor.http_client.timeout.read == 5

    def test_build_client_sandbox_override(self):
        client = OuraSettings().build_client(use_sandbox=True)

        assert isinstance(client.auth, SandboxAuth)

    def test_build_client_without_token(self):
        with pytest.raises(MissingTokenError):
            OuraSettings().build_client()

    def test_build_oauth_client(self):
        settings = OuraSettings(
            client_id="client",
            client_secret="secret",
            redirect_uri="https://app.example.com/callback",
        )

        assert isinstance(settings.build_oauth_client().auth, OAuthAuth)

    @pytest.mark.parametrize(
        "settings, builder, error",
        [
            (OuraSettings(), "build_client", MissingTokenError),
            (OuraSettings(client_secret="s", redirect_uri="https://r"), "build_oauth_client", MissingClientIdError),
            (OuraSettings(client_secret="s"), "build_webhook_client", MissingClientIdError),
        ],
    )
    def test_missing_credential_opens_no_connection_pool(self, settings, builder, error):
        with patch("oura_connector.config.RequestExecutor") as mock_executor:
            with pytest.raises(error):
                getattr(settings, builder)()

        mock_executor.assert_not_called()

    def test_build_webhook_client_requires_id(self):
        with pytest.raises(MissingClientIdError):
            OuraSettings(client_secret="secret").build_webhook_client()
