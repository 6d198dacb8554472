"""Tests for cursor pagination."""

from unittest.mock import AsyncMock

import httpx
import pytest

from oura_connector.exceptions import APIError
from oura_connector.pagination import fetch_all, iter_pages
from oura_connector.vendor_types import API_URLS, RequestDescriptor

FIRST = RequestDescriptor(
    path="daily_activity",
    params={"start_date": "2023-01-01", "end_date": "2023-01-10"},
)


def executor_returning(*bodies):
    """Executor double whose execute() returns the given bodies in order."""
    executor = AsyncMock()
    executor.execute.side_effect = list(bodies)
    return executor


class TestFetchAll:
    """Tests for fetch_all."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("pages", [1, 2, 5])
    async def test_concatenates_pages_in_order(self, pages):
        bodies = [
            {
                "data": [{"page": i, "n": 0}, {"page": i, "n": 1}],
                "next_token": f"cursor-{i}" if i < pages - 1 else None,
            }
            for i in range(pages)
        ]
        executor = executor_returning(*bodies)

        result = await fetch_all(executor, FIRST, API_URLS.BASE_V2, {})

        expected = [item for body in bodies for item in body["data"]]
        assert result == expected
        assert executor.execute.call_count == pages

        # First request uses the caller's params; later ones only the cursor
        descriptors = [call.args[0] for call in executor.execute.call_args_list]
        assert descriptors[0].params == FIRST.params
        for i, descriptor in enumerate(descriptors[1:], start=1):
            assert descriptor.params == {"next_token": f"cursor-{i - 1}"}
            assert descriptor.path == "daily_activity"

    @pytest.mark.asyncio
    async def test_singleton_returned_unchanged(self, sample_personal_info):
        executor = executor_returning(sample_personal_info)

        result = await fetch_all(
            executor, RequestDescriptor(path="personal_info"), API_URLS.BASE_V2, {}
        )

        assert result == sample_personal_info
        assert executor.execute.call_count == 1

    @pytest.mark.asyncio
    async def test_empty_data(self):
        executor = executor_returning({"data": [], "next_token": None})

        assert await fetch_all(executor, FIRST, API_URLS.BASE_V2, {}) == []

    @pytest.mark.asyncio
    async def test_missing_next_token_ends(self):
        executor = executor_returning({"data": [{"id": 1}]})

        assert await fetch_all(executor, FIRST, API_URLS.BASE_V2, {}) == [{"id": 1}]
        assert executor.execute.call_count == 1

    @pytest.mark.asyncio
    async def test_error_mid_pagination_discards_results(self):
        executor = AsyncMock()
        executor.execute.side_effect = [
            {"data": [{"id": 1}], "next_token": "abc"},
            APIError("Problem fetching data.", status_code=500),
        ]

        with pytest.raises(APIError):
            await fetch_all(executor, FIRST, API_URLS.BASE_V2, {})

        assert executor.execute.call_count == 2

    @pytest.mark.asyncio
    async def test_headers_and_base_url_forwarded(self):
        executor = executor_returning({"data": [], "next_token": None})
        headers = {"Authorization": "Bearer t"}

        await fetch_all(executor, FIRST, API_URLS.BASE_V2_SANDBOX, headers)

        executor.execute.assert_awaited_once_with(FIRST, API_URLS.BASE_V2_SANDBOX, headers)


class TestIterPages:
    @pytest.mark.asyncio
    async def test_yields_each_page(self):
        executor = executor_returning(
            {"data": [1, 2], "next_token": "x"},
            {"data": [3], "next_token": None},
        )

        pages = [page async for page in iter_pages(executor, FIRST, API_URLS.BASE_V2)]

        assert [page["data"] for page in pages] == [[1, 2], [3]]


@pytest.mark.asyncio
async def test_cursor_sent_on_the_wire(make_transport, sample_activity_page_one, sample_activity_page_two):
    executor, transport = make_transport(
        httpx.Response(200, json=sample_activity_page_one),
        httpx.Response(200, json=sample_activity_page_two),
    )

    result = await fetch_all(executor, FIRST, API_URLS.BASE_V2)

    assert [item["id"] for item in result] == ["a1", "a2", "a3"]
    first, second = transport.requests
    assert dict(first.url.params) == {"start_date": "2023-01-01", "end_date": "2023-01-10"}
    assert dict(second.url.params) == {"next_token": "abc"}
