"""Custom exceptions for the Oura API client."""

from enum import Enum
from typing import Any

from .vendor_types import ErrorDetail

NO_DETAILS = "No details"


class ErrorKind(str, Enum):
    """Closed set of error kinds raised by the client."""

    MISSING_CREDENTIAL = "missing_credential"
    VALIDATION = "validation"
    RATE_LIMIT = "rate_limit"
    API = "api"
    WEBHOOK = "webhook"


class OuraError(Exception):
    """Base exception for all Oura client errors."""

    kind: ErrorKind = ErrorKind.API

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API error response format."""
        return {
            "error": {
                "code": self.kind.value,
                "type": self.__class__.__name__,
                "message": self.message,
            }
        }


class MissingCredentialError(OuraError):
    """A token, client id, client secret or redirect URI was not supplied."""

    kind = ErrorKind.MISSING_CREDENTIAL
    default_message = "Credential is missing"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class MissingTokenError(MissingCredentialError):
    default_message = "Access token is missing"


class MissingClientIdError(MissingCredentialError):
    default_message = "Client Id is missing"


class MissingClientSecretError(MissingCredentialError):
    default_message = "Client Secret is missing"


class MissingRedirectUriError(MissingCredentialError):
    default_message = "Redirect URI is missing"


class HTTPErrorMixin:
    """Response fields shared by errors raised from an HTTP exchange."""

    status_code: int | None
    status_text: str | None
    detail: str | None
    url: str | None
    method: str | None

    def _set_response_fields(
        self,
        status_code: int | None,
        status_text: str | None,
        detail: str | None,
        url: str | None,
        method: str | None,
    ) -> None:
        self.status_code = status_code
        self.status_text = status_text
        self.detail = detail
        self.url = url
        self.method = method

    @property
    def error_detail(self) -> ErrorDetail | None:
        """Structured view of the failed exchange, if there was one."""
        if self.status_code is None:
            return None
        return ErrorDetail(
            status_code=self.status_code,
            status_text=self.status_text or "",
            detail=self.detail if self.detail is not None else NO_DETAILS,
            url=self.url or "",
            method=self.method or "",
        )


class ValidationError(HTTPErrorMixin, OuraError):
    """Invalid caller input, detected locally or reported by the API (HTTP 400)."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        status_text: str | None = None,
        detail: str | None = None,
        url: str | None = None,
        method: str | None = None,
    ):
        super().__init__(message)
        self._set_response_fields(status_code, status_text, detail, url, method)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.status_code is not None:
            data["error"].update(status_code=self.status_code, detail=self.detail)
        return data


class APIError(HTTPErrorMixin, OuraError):
    """Oura API errors (non-2xx responses, network failures)."""

    kind = ErrorKind.API

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        status_text: str | None = None,
        detail: str | None = None,
        url: str | None = None,
        method: str | None = None,
    ):
        super().__init__(message)
        self._set_response_fields(status_code, status_text, detail, url, method)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["error"].update(
            status_code=self.status_code,
            status_text=self.status_text,
            detail=self.detail,
            url=self.url,
            method=self.method,
        )
        return data


class RateLimitError(APIError):
    """Rate limiting errors (429 from the Oura API)."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(
        self,
        message: str,
        status_code: int | None = 429,
        status_text: str | None = None,
        detail: str | None = None,
        url: str | None = None,
        method: str | None = None,
        retry_after: int | None = None,
    ):
        super().__init__(message, status_code, status_text, detail, url, method)
        self.retry_after = retry_after


class OAuthError(APIError):
    """OAuth token endpoint errors (exchange, refresh or revoke failed)."""


class WebhookError(OuraError):
    """Webhook callback verification or parsing errors."""

    kind = ErrorKind.WEBHOOK


def error_from_response(
    message: str,
    status_code: int,
    status_text: str,
    detail: str,
    url: str,
    method: str,
    retry_after: int | None = None,
    default: type[APIError] = APIError,
) -> OuraError:
    """Pick the error class for a non-2xx status code."""
    if status_code == 400:
        return ValidationError(message, status_code, status_text, detail, url, method)
    if status_code == 429:
        return RateLimitError(
            message, status_code, status_text, detail, url, method, retry_after=retry_after
        )
    return default(message, status_code, status_text, detail, url, method)
