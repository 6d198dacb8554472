"""Shared fixtures."""

import sys
from pathlib import Path

# Make the repository root importable (oura_connector package and ouractl module)
sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx
import pytest

from oura_connector.http_client import RequestExecutor


class RecordingTransport(httpx.MockTransport):
    """MockTransport that replays queued responses and records every request."""

    def __init__(self, responses: list[httpx.Response]):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


@pytest.fixture
def make_transport():
    """Build a RecordingTransport-backed executor from a list of responses."""

    def _make(*responses: httpx.Response) -> tuple[RequestExecutor, RecordingTransport]:
        transport = RecordingTransport(list(responses))
        executor = RequestExecutor(http_client=httpx.AsyncClient(transport=transport))
        return executor, transport

    return _make


@pytest.fixture
def sample_activity_page_one():
    return {
        "data": [
            {"id": "a1", "day": "2023-01-01", "score": 80, "steps": 9500},
            {"id": "a2", "day": "2023-01-02", "score": 72, "steps": 7000},
        ],
        "next_token": "abc",
    }


@pytest.fixture
def sample_activity_page_two():
    return {
        "data": [
            {"id": "a3", "day": "2023-01-03", "score": 91, "steps": 14200},
        ],
        "next_token": None,
    }


@pytest.fixture
def sample_personal_info():
    return {
        "id": "user-1",
        "age": 31,
        "weight": 74.5,
        "height": 1.82,
        "biological_sex": "male",
        "email": "user@example.com",
    }


@pytest.fixture
def sample_subscription():
    return {
        "id": "sub-123",
        "callback_url": "https://app.example.com/oura/webhook",
        "event_type": "create",
        "data_type": "sleep",
        "expiration_time": "2026-11-17T10:00:00+00:00",
    }
