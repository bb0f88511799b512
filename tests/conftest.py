"""Test fixtures for the connect hub."""

from typing import Any, Dict, List, Optional, Tuple, Union
from unittest.mock import AsyncMock

import pytest

from api.client import ApiResponse
from connectors.google import GoogleProvider
from connectors.meta import MetaProvider
from core.navigation import PageNavigator

Reply = Union[ApiResponse, Exception]


class FakeApi:
    """Stands in for HubApiClient; routes are keyed by (method, path)."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Reply]] = {}
        self.calls: List[Tuple[str, str, Optional[dict], Optional[dict]]] = []
        self.request = AsyncMock(side_effect=self._dispatch)

    def on(self, method: str, path: str, status: int = 200, body: Optional[dict] = None,
           exc: Optional[Exception] = None) -> "FakeApi":
        reply: Reply = exc if exc is not None else ApiResponse(status, body or {})
        self.routes.setdefault((method, path), []).append(reply)
        return self

    async def _dispatch(self, method: str, path: str, *, params=None, json=None) -> ApiResponse:
        self.calls.append((method, path, params, json))
        replies = self.routes.get((method, path))
        if not replies:
            return ApiResponse(404, {"message": "no route"})
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def called(self, method: str, path: str) -> bool:
        return any(m == method and p == path for m, p, _, _ in self.calls)

    def count(self, method: str, path: str) -> int:
        return sum(1 for m, p, _, _ in self.calls if m == method and p == path)

    def last(self, method: str, path: str) -> Tuple[Any, Any]:
        for m, p, params, json in reversed(self.calls):
            if m == method and p == path:
                return params, json
        raise AssertionError(f"{method} {path} was never called")


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def meta():
    return MetaProvider(api_prefix="/api/v1")


@pytest.fixture
def google():
    return GoogleProvider(api_prefix="/api/v1")


@pytest.fixture
def navigator():
    return PageNavigator("https://hub.omni7.io/connect")
