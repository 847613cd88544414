"""Pytest configuration shared across the suite."""

from __future__ import annotations

from typing import Any, Dict, List

import httpx
import pytest

TOKEN_PATH = "/cgi-bin/component/api_component_token"


class FakeWeChat:
    """In-process stand-in for api.weixin.qq.com served through MockTransport.

    Responses queued for a path are served in order; the last one repeats.
    Unqueued token requests mint ``token-1``, ``token-2`` and so on, any other
    unqueued path answers ``{"errcode": 0, "errmsg": "ok"}``.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._queued: Dict[str, List[Any]] = {}
        self._minted = 0

    def queue(self, path: str, *payloads: Any) -> None:
        self._queued.setdefault(path, []).extend(payloads)

    def calls(self, path: str) -> List[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        queued = self._queued.get(path)
        if queued:
            payload = queued.pop(0) if len(queued) > 1 else queued[0]
        elif path == TOKEN_PATH:
            self._minted += 1
            payload = {
                "component_access_token": f"token-{self._minted}",
                "expires_in": 7200,
            }
        else:
            payload = {"errcode": 0, "errmsg": "ok"}
        if isinstance(payload, httpx.Response):
            return payload
        return httpx.Response(200, json=payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def fake_wechat() -> FakeWeChat:
    return FakeWeChat()
