"""Cursor pagination over Oura list endpoints."""

import logging
from collections.abc import AsyncIterator
from typing import Any

from .http_client import RequestExecutor
from .vendor_types import RequestDescriptor

logger = logging.getLogger(__name__)


async def iter_pages(
    executor: RequestExecutor,
    descriptor: RequestDescriptor,
    base_url: str,
    headers: dict[str, str] | None = None,
) -> AsyncIterator[dict[str, Any]]:
    """
    Yield raw response bodies, following ``next_token`` until it is null
    (an empty string also ends the walk).

    The first request uses the descriptor's own parameters. Every following
    request sends only ``{"next_token": <cursor>}``; the API treats the
    cursor as carrying the original filters.

    A body without a ``data`` member is yielded once and ends the iteration.
    """
    current = descriptor
    page = 0
    while True:
        body = await executor.execute(current, base_url, headers)
        page += 1
        yield body

        if not isinstance(body, dict) or "data" not in body:
            return

        next_token = body.get("next_token")
        if not next_token:
            return

        logger.debug("Following next_token for %s (page %d)", descriptor.path, page + 1)
        current = descriptor.with_params({"next_token": next_token})


async def fetch_all(
    executor: RequestExecutor,
    descriptor: RequestDescriptor,
    base_url: str,
    headers: dict[str, str] | None = None,
) -> list[Any] | Any:
    """
    Fetch every page of a list endpoint into one list.

    Args:
        executor: Request executor
        descriptor: Request for the first page
        base_url: Base URL from the auth strategy
        headers: Credential headers from the auth strategy

    Returns:
        Concatenated ``data`` items in server order, or the body itself when
        the endpoint answers with a single document

    Raises:
        OuraError: From any page; items gathered so far are dropped
    """
    results: list[Any] = []
    async for body in iter_pages(executor, descriptor, base_url, headers):
        if not isinstance(body, dict) or "data" not in body:
            return body
        results.extend(body["data"])
    return results
