"""Pytest configuration - loads .env for integration tests and provides a capturing transport."""

import io
import json
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

from doit_console.sdk import DoitClient

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

TOKEN = "test-token"
CUSTOMER_CONTEXT = "cust-123"
BASE_URL = "https://api.example.test"


class FakeResponse:
    """Minimal stand-in for the object returned by urllib openers."""

    def __init__(self, status: int, body: bytes):
        self.status = status
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> bool:
        return False


class FakeOpener:
    """Records every request and replays queued responses in order."""

    def __init__(self) -> None:
        self.requests: list[urllib.request.Request] = []
        self.timeouts: list[float | None] = []
        self._responses: list[tuple[int, bytes] | BaseException] = []

    def queue(self, status: int = 200, body: Any = None) -> "FakeOpener":
        if isinstance(body, bytes):
            raw = body
        elif isinstance(body, str):
            raw = body.encode("utf-8")
        elif body is None:
            raw = b""
        else:
            raw = json.dumps(body).encode("utf-8")
        self._responses.append((status, raw))
        return self

    def fail(self, error: BaseException) -> "FakeOpener":
        self._responses.append(error)
        return self

    def open(self, request: urllib.request.Request, timeout: float | None = None) -> FakeResponse:
        self.requests.append(request)
        self.timeouts.append(timeout)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.get_method()} {request.full_url}")
        item = self._responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        status, raw = item
        # urllib raises for anything outside 2xx
        if not 200 <= status < 300:
            raise urllib.error.HTTPError(request.full_url, status, "error", {}, io.BytesIO(raw))
        return FakeResponse(status, raw)

    @property
    def last(self) -> urllib.request.Request:
        return self.requests[-1]


def request_path(request: urllib.request.Request) -> str:
    return urllib.parse.urlsplit(request.full_url).path


def request_query(request: urllib.request.Request) -> dict[str, list[str]]:
    return urllib.parse.parse_qs(urllib.parse.urlsplit(request.full_url).query)


def request_json(request: urllib.request.Request) -> Any:
    return json.loads(request.data.decode("utf-8"))


@pytest.fixture
def opener() -> FakeOpener:
    return FakeOpener()


@pytest.fixture
def client(opener: FakeOpener) -> DoitClient:
    """A client whose verification call has already succeeded."""
    opener.queue(200, {})
    doit = DoitClient(TOKEN, CUSTOMER_CONTEXT, base_url=BASE_URL, opener=opener)
    opener.requests.clear()
    opener.timeouts.clear()
    return doit
