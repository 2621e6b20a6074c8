"""Shared fakes standing in for requests sessions, without network calls."""

from __future__ import annotations

import json
from typing import Any, Optional, Union

import pytest


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Union[str, Any] = "") -> None:
        self.status_code = status_code
        self.text = body if isinstance(body, str) else json.dumps(body)

    def json(self) -> Any:
        return json.loads(self.text)


class FakeSession:
    """
    Maps URLs to canned responses or exceptions and records every call.

    ``routes`` keys are full URLs; a value may be a FakeResponse or an
    exception instance to raise.
    """

    def __init__(self, routes: Optional[dict[str, Any]] = None) -> None:
        self.routes = dict(routes or {})
        self.headers: dict[str, str] = {}
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def __enter__(self) -> FakeSession:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.closed = True

    def _respond(self, url: str) -> FakeResponse:
        result = self.routes[url]
        if isinstance(result, Exception):
            raise result
        return result

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        return self._respond(url)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("GET", url, **kwargs)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()
