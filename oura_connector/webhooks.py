"""
Webhook subscriptions: management API client and callback verification.

The subscription API authenticates with the application's client id and
secret (``x-client-id`` / ``x-client-secret`` headers), not a user token.
"""

import hashlib
import hmac
import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .auth import WebhookAuth
from .exceptions import WebhookError
from .http_client import RequestExecutor
from .vendor_types import (
    DataType,
    EventType,
    HTTPMethod,
    RequestDescriptor,
    Subscription,
    WebhookEvent,
)

SIGNATURE_HEADER = "x-oura-signature"
TIMESTAMP_HEADER = "x-oura-timestamp"


def _enum_value(value: EventType | DataType | str) -> str:
    return value.value if isinstance(value, (EventType, DataType)) else value


class WebhookClient:
    """
    Manage webhook subscriptions for an Oura application.

    Supports:
    - Listing, reading, creating and updating subscriptions
    - Deleting subscriptions
    - Renewing subscriptions before they expire
    """

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        executor: RequestExecutor | None = None,
    ):
        self.auth = WebhookAuth(client_id, client_secret)
        self.executor = executor or RequestExecutor()

    async def _request(
        self,
        method: HTTPMethod,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> Any:
        descriptor = RequestDescriptor(method=method, path=path, body=body)
        return await self.executor.execute(
            descriptor, self.auth.base_url(), self.auth.auth_headers()
        )

    async def list_subscriptions(self) -> list[Subscription]:
        """List all subscriptions of the application."""
        data = await self._request(HTTPMethod.GET, "subscription")
        return [Subscription.model_validate(item) for item in data]

    async def get_subscription(self, subscription_id: str) -> Subscription:
        data = await self._request(HTTPMethod.GET, f"subscription/{subscription_id}")
        return Subscription.model_validate(data)

    async def create_subscription(
        self,
        callback_url: str,
        verification_token: str,
        event_type: EventType | str,
        data_type: DataType | str,
    ) -> Subscription:
        """
        Create a subscription.

        Oura calls ``callback_url`` with ``verification_token`` and a
        challenge before the subscription becomes active (see
        ``verify_challenge``).
        """
        body = {
            "callback_url": callback_url,
            "verification_token": verification_token,
            "event_type": _enum_value(event_type),
            "data_type": _enum_value(data_type),
        }
        data = await self._request(HTTPMethod.POST, "subscription", body)
        return Subscription.model_validate(data)

    async def update_subscription(
        self,
        subscription_id: str,
        verification_token: str,
        callback_url: str | None = None,
        event_type: EventType | str | None = None,
        data_type: DataType | str | None = None,
    ) -> Subscription:
        """
        Update a subscription.

        Only the fields given are sent; omitted fields are left out of the
        body rather than sent as null.
        """
        body: dict[str, Any] = {"verification_token": verification_token}
        if callback_url:
            body["callback_url"] = callback_url
        if event_type:
            body["event_type"] = _enum_value(event_type)
        if data_type:
            body["data_type"] = _enum_value(data_type)

        data = await self._request(HTTPMethod.PUT, f"subscription/{subscription_id}", body)
        return Subscription.model_validate(data)

    async def delete_subscription(self, subscription_id: str) -> Any:
        """
        Delete a subscription.

        Returns:
            The response payload: parsed JSON when the body is JSON,
            otherwise the raw text (often empty)
        """
        text = await self._request(HTTPMethod.DELETE, f"subscription/{subscription_id}")
        if not text:
            return text
        try:
            return json.loads(text)
        except ValueError:
            return text

    async def renew_subscription(self, subscription_id: str) -> Subscription:
        """Extend a subscription's expiration time."""
        data = await self._request(HTTPMethod.PUT, f"subscription/renew/{subscription_id}")
        return Subscription.model_validate(data)

    async def close(self) -> None:
        await self.executor.close()

    async def __aenter__(self) -> "WebhookClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


def verify_challenge(params: Mapping[str, str], verification_token: str) -> dict[str, str]:
    """
    Answer the verification request Oura sends to a new callback URL.

    Args:
        params: Query parameters of the verification GET request
        verification_token: Token given when the subscription was created

    Returns:
        ``{"challenge": <challenge>}``, the body to respond with

    Raises:
        WebhookError: If the token does not match or the challenge is missing
    """
    received = params.get("verification_token") or ""
    if not hmac.compare_digest(received, verification_token):
        raise WebhookError("Verification token mismatch")

    challenge = params.get("challenge")
    if not challenge:
        raise WebhookError("Missing challenge parameter")

    return {"challenge": challenge}


class WebhookVerifier:
    """
    Verifies the signature of webhook notifications.

    Oura signs ``timestamp + body`` with HMAC-SHA256 using the application's
    client secret and sends the upper-case hex digest.
    """

    def __init__(self, client_secret: str):
        self.secret = client_secret.encode() if isinstance(client_secret, str) else client_secret

    def compute_signature(self, body: bytes, timestamp: str) -> str:
        return hmac.new(
            self.secret,
            timestamp.encode() + body,
            hashlib.sha256,
        ).hexdigest().upper()

    def verify_signature(self, body: bytes, signature: str | None, timestamp: str | None) -> bool:
        """
        Verify a notification signature.

        Returns:
            True if signature is valid

        Raises:
            WebhookError: If headers are missing or the signature does not match
        """
        if not signature or not timestamp:
            raise WebhookError("Missing signature or timestamp headers")

        computed = self.compute_signature(body, timestamp)

        # Constant-time comparison
        if not hmac.compare_digest(computed, signature.upper()):
            raise WebhookError("HMAC signature mismatch")

        return True

    def verify_headers(self, headers: Mapping[str, str], body: bytes) -> bool:
        """Verify using the signature and timestamp headers of a request."""
        lowered = {key.lower(): value for key, value in headers.items()}
        return self.verify_signature(
            body,
            lowered.get(SIGNATURE_HEADER),
            lowered.get(TIMESTAMP_HEADER),
        )


def parse_event(raw_body: bytes | str) -> WebhookEvent:
    """
    Parse a webhook notification body.

    Raises:
        WebhookError: If the body is not JSON or lacks required fields
    """
    try:
        data = json.loads(raw_body)
    except ValueError as e:
        raise WebhookError(f"Invalid JSON payload: {e}") from e

    if not isinstance(data, dict):
        raise WebhookError("Webhook payload must be a JSON object")

    for field in ("event_type", "data_type"):
        if field not in data:
            raise WebhookError(f"Missing required field: {field}")

    try:
        return WebhookEvent.model_validate({**data, "raw": data})
    except PydanticValidationError as e:
        raise WebhookError(f"Invalid webhook payload: {e}") from e
