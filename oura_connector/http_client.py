"""HTTP request executor shared by the data, webhook and OAuth facades."""

import json
import logging
from typing import Any
from urllib.parse import quote

import httpx
from dateutil.parser import isoparse

from .exceptions import NO_DETAILS, APIError, ValidationError, error_from_response
from .vendor_types import DATE_PARAMS, HTTPMethod, RequestDescriptor

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def validate_date_params(params: dict[str, str] | None) -> None:
    """
    Reject malformed date filters before anything is sent.

    Raises:
        ValidationError: If a date or datetime parameter is not ISO 8601
    """
    for key, value in (params or {}).items():
        if key not in DATE_PARAMS:
            continue
        try:
            isoparse(value)
        except (ValueError, OverflowError, TypeError) as e:
            raise ValidationError(f"Invalid date format for {key}: {value}") from e


def extract_detail(response: httpx.Response) -> str:
    """Pull the human-readable ``detail`` out of an Oura error body."""
    try:
        data = response.json()
    except ValueError:
        return NO_DETAILS

    detail = data.get("detail") if isinstance(data, dict) else None
    if not detail:
        return ""
    if isinstance(detail, str):
        return detail
    return json.dumps(detail)


def parse_retry_after(response: httpx.Response) -> int | None:
    value = response.headers.get("Retry-After")
    if value and value.strip().isdigit():
        return int(value)
    return None


class RequestExecutor:
    """
    Issues single authenticated requests against the Oura API.

    The executor is stateless apart from its connection pool: the base URL
    and credential headers are passed in on every call, so one executor can
    serve any number of facades and concurrent calls.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout)

    @staticmethod
    def build_url(base_url: str, path: str) -> str:
        return base_url + quote(path, safe="/")

    async def execute(
        self,
        descriptor: RequestDescriptor,
        base_url: str,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Execute one request.

        Args:
            descriptor: Method, path, query parameters and body
            base_url: Absolute URL prefix chosen by the auth strategy
            headers: Credential headers from the auth strategy

        Returns:
            Parsed JSON, or the raw response text for DELETE

        Raises:
            ValidationError: Invalid date parameter, or HTTP 400
            RateLimitError: HTTP 429
            APIError: Any other non-2xx status or a network failure
        """
        validate_date_params(descriptor.params)

        method = descriptor.method.value
        url = self.build_url(base_url, descriptor.path)
        request_headers = dict(headers or {})
        body = None
        if descriptor.method in (HTTPMethod.POST, HTTPMethod.PUT):
            request_headers["Content-Type"] = "application/json"
            body = descriptor.body

        logger.debug("%s %s params=%s", method, url, descriptor.params)

        try:
            response = await self.http_client.request(
                method,
                url,
                params=descriptor.params,
                json=body,
                headers=request_headers,
            )
        except httpx.RequestError as e:
            raise APIError(
                f"Network error during request: {e}",
                status_code=0,
                status_text="",
                detail=str(e),
                url=url,
                method=method,
            ) from e

        logger.debug("Oura API response status=%s for %s", response.status_code, url)

        if response.is_success:
            if descriptor.method == HTTPMethod.DELETE:
                return response.text
            try:
                return response.json()
            except ValueError as e:
                raise APIError(
                    "Invalid JSON in response.",
                    status_code=response.status_code,
                    status_text=response.reason_phrase,
                    detail=response.text or NO_DETAILS,
                    url=url,
                    method=method,
                ) from e

        raise error_from_response(
            "Problem fetching data.",
            status_code=response.status_code,
            status_text=response.reason_phrase,
            detail=extract_detail(response),
            url=url,
            method=method,
            retry_after=parse_retry_after(response),
        )

    async def close(self) -> None:
        """Close HTTP connections (only if this executor opened them)."""
        if self._owns_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "RequestExecutor":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
