"""Fake requests session for API tests."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Union

import pytest
import requests

from freightdesk.api.client import ApiClient


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, raw: Optional[bytes] = None) -> None:
        self.status_code = status_code
        if raw is not None:
            self.content = raw
        elif body is None:
            self.content = b""
        else:
            self.content = json.dumps(body).encode("utf-8")

    def json(self) -> Any:
        return json.loads(self.content.decode("utf-8"))

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.outcomes: List[Union[FakeResponse, Exception]] = []
        self.closed = False

    def respond(self, status_code: int = 200, body: Any = None, raw: Optional[bytes] = None) -> None:
        self.outcomes.append(FakeResponse(status_code, body, raw))

    def fail(self, exc: Exception) -> None:
        self.outcomes.append(exc)

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> ApiClient:
    return ApiClient(
        "https://api.example.com/api:",
        token_provider=lambda: "tok-123",
        timeout=5,
        session=session,
    )
