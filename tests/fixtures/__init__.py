"""
Test fixtures for the Platform Provider.

MockPlatform scripts platform API replies for httpx.MockTransport so the
executor, engine and pollers run for real without network access.
"""

from collections import defaultdict
from typing import Any, Union

import httpx


Reply = Union[httpx.Response, Exception]


class MockPlatform:
    """Scripted platform API for httpx.MockTransport.

    Replies are queued per (method, path). Each request consumes the next
    reply; the last reply for a route repeats forever, which suits polling
    endpoints that settle into a terminal state.

    Usage:
        mock_platform.reply("GET", "/api/v1/runtimes/r1",
                            json_reply({"status": "pending"}),
                            json_reply({"status": "ready"}))
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Reply]] = defaultdict(list)
        self.requests: list[httpx.Request] = []

    def reply(self, method: str, path: str, *replies: Reply) -> None:
        self.routes[(method, path)].extend(replies)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(500, json={"error": f"no reply scripted for {request.method} {request.url.path}"})
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        # Fresh copy so a repeating reply can be served more than once
        return httpx.Response(item.status_code, headers=item.headers, content=item.content)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def json_reply(payload: Any, status: int = 200, headers: dict[str, str] | None = None) -> httpx.Response:
    """Build a JSON reply for MockPlatform.reply()."""
    return httpx.Response(status, json=payload, headers=headers)
