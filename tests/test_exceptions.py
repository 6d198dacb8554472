"""Tests for the error taxonomy."""

import pytest

from oura_connector.exceptions import (
    APIError,
    ErrorKind,
    MissingClientIdError,
    MissingCredentialError,
    MissingTokenError,
    OAuthError,
    OuraError,
    RateLimitError,
    ValidationError,
    WebhookError,
    error_from_response,
)
from oura_connector.vendor_types import ErrorDetail


class TestErrorFromResponse:
    """Tests for status code mapping."""

    def _error(self, status_code, **kwargs):
        return error_from_response(
            "Problem fetching data.",
            status_code=status_code,
            status_text="Status",
            detail="bad things",
            url="https://api.ouraring.com/v2/usercollection/sleep",
            method="GET",
            **kwargs,
        )

    def test_400_is_validation_error(self):
        error = self._error(400)
        assert isinstance(error, ValidationError)
        assert error.kind is ErrorKind.VALIDATION
        assert error.status_code == 400

    def test_429_is_rate_limit_error(self):
        error = self._error(429, retry_after=30)
        assert isinstance(error, RateLimitError)
        assert isinstance(error, APIError)
        assert error.kind is ErrorKind.RATE_LIMIT
        assert error.retry_after == 30

    @pytest.mark.parametrize("status_code", [401, 403, 404, 500, 503])
    def test_other_statuses_are_api_errors(self, status_code):
        error = self._error(status_code)
        assert type(error) is APIError
        assert error.kind is ErrorKind.API
        assert error.detail == "bad things"

    def test_default_class_override(self):
        error = self._error(401, default=OAuthError)
        assert isinstance(error, OAuthError)


class TestErrorFields:
    """Tests for fields carried by errors."""

    def test_api_error_detail_model(self):
        error = APIError(
            "Problem fetching data.",
            status_code=500,
            status_text="Internal Server Error",
            detail="boom",
            url="https://api.ouraring.com/v2/usercollection/workout",
            method="GET",
        )

        assert error.error_detail == ErrorDetail(
            status_code=500,
            status_text="Internal Server Error",
            detail="boom",
            url="https://api.ouraring.com/v2/usercollection/workout",
            method="GET",
        )

    def test_local_validation_error_has_no_detail(self):
        error = ValidationError("Invalid date format for start_date: nope")
        assert error.status_code is None
        assert error.error_detail is None
        assert error.to_dict()["error"]["code"] == "validation"

    def test_missing_credential_messages(self):
        assert str(MissingTokenError()) == "Access token is missing"
        assert str(MissingClientIdError()) == "Client Id is missing"
        assert isinstance(MissingTokenError(), MissingCredentialError)
        assert MissingTokenError().kind is ErrorKind.MISSING_CREDENTIAL

    def test_to_dict(self):
        error = RateLimitError("Problem fetching data.", detail="slow down", method="GET")
        data = error.to_dict()

        assert data["error"]["code"] == "rate_limit"
        assert data["error"]["type"] == "RateLimitError"
        assert data["error"]["status_code"] == 429
        assert data["error"]["detail"] == "slow down"

    def test_every_error_has_a_kind(self):
        errors = [
            MissingTokenError(),
            ValidationError("bad"),
            RateLimitError("slow"),
            APIError("api"),
            WebhookError("hook"),
        ]
        assert {e.kind for e in errors} == set(ErrorKind)
        assert all(isinstance(e, OuraError) for e in errors)
