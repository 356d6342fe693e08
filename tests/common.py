"""Fake aiohttp objects shared by the test modules."""

from __future__ import annotations

import json
from collections import defaultdict
from typing import Any

from yarl import URL

from easee_ev.const import BASE_URL


class FakeResponse:
    """Minimal async response object returned by FakeSession.request."""

    def __init__(
        self,
        *,
        status: int = 200,
        json_body: object = None,
        text_body: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status = status
        self.headers = dict(headers or {})
        if json_body is not None:
            self._text = json.dumps(json_body)
            self.headers.setdefault("Content-Type", "application/json; charset=utf-8")
        else:
            self._text = text_body
        self.reason = "reason"

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False

    async def text(self) -> str:
        return self._text


class FakeSession:
    """Stub aiohttp.ClientSession serving queued responses per route.

    Routes are keyed by method and URL path; responses queued for a route are
    handed out in order. Every call is recorded in ``calls``.
    """

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], list[FakeResponse | Exception]] = (
            defaultdict(list)
        )
        self.calls: list[tuple[str, URL, dict[str, Any]]] = []
        self.closed = False

    def add(self, method: str, path: str, *responses: FakeResponse | Exception) -> None:
        self._routes[(method, path)].extend(responses)

    def request(self, method: str, url, **kwargs):
        url = URL(str(url))
        self.calls.append((method, url, kwargs))
        queue = self._routes.get((method, url.path))
        if not queue:
            raise AssertionError(f"No response prepared for {method} {url}")
        resp = queue.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp

    def calls_to(self, method: str, path: str) -> list[tuple[str, URL, dict[str, Any]]]:
        return [call for call in self.calls if call[0] == method and call[1].path == path]

    async def close(self) -> None:
        self.closed = True


def api_url(path: str) -> str:
    return f"{BASE_URL}{path}"
