from __future__ import annotations

import json
import os
import sys
from typing import Any

import httpx
import pytest

# Add repository root to sys.path for `import krea_mcp.*` in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from krea_mcp.client import KreaClient  # noqa: E402


class FakeClock:
    """Virtual monotonic clock; ``sleep`` advances it instead of waiting.

    Time is kept in whole milliseconds so deadline comparisons are exact.
    """

    def __init__(self) -> None:
        self.now_ms = 0
        self.sleeps: list[float] = []

    def clock(self) -> float:
        return self.now_ms / 1000

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now_ms += round(seconds * 1000)


class KreaApiStub:
    """Records requests and answers them from canned responses.

    POSTs always get ``create_response``; GETs on ``/jobs/...`` pop
    ``job_responses`` in order, repeating the last one once exhausted.
    """

    def __init__(self, create_response: Any = None, job_responses: list[Any] | None = None, status_code: int = 200) -> None:
        self.create_response = create_response if create_response is not None else {"id": "job-1", "status": "queued"}
        self.job_responses = list(job_responses or [])
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    @property
    def posts(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    @property
    def gets(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    def posted_json(self, index: int = 0) -> Any:
        return json.loads(self.posts[index].content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            return httpx.Response(self.status_code, json=self.create_response)
        body = self.job_responses.pop(0) if len(self.job_responses) > 1 else self.job_responses[0]
        return httpx.Response(200, json=body)

    def client(self) -> KreaClient:
        return KreaClient("test-key", transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("KREA_API_KEY", raising=False)
    from krea_mcp.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_stub():
    return KreaApiStub
