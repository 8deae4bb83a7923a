"""Async test client for scheme transports.

Returns the same ``Response`` type used in production. Sends requests
through the ASGI interface directly, with no network involved.
"""

from __future__ import annotations

import json as json_module
from collections.abc import MutableMapping
from typing import Any
from urllib.parse import urlsplit

import anyio

from protoroute.http.response import Response
from protoroute.server.transport import SchemeTransport


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client for a ``SchemeTransport``.

    Entering the client starts a session (startup hooks run, providers
    bind their routers); leaving it ends the session. Every request is
    bounded by ``timeout`` seconds.

    Usage::

        async with TestClient(transport) as client:
            response = await client.post("app://records/user", json={"name": "Ada"})
    """

    __slots__ = ("timeout", "transport")

    def __init__(self, transport: SchemeTransport, *, timeout: float = 5.0) -> None:
        self.transport = transport
        self.timeout = timeout

    async def __aenter__(self) -> TestClient:
        await self.transport.startup()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.transport.shutdown()

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        json: Any = None,
    ) -> Response:
        """Send a request for an absolute *url* (``scheme://authority/path``)."""
        request_headers = {k.lower(): v for k, v in (headers or {}).items()}
        if json is not None:
            body = json_module.dumps(json).encode("utf-8")
            request_headers.setdefault("content-type", "application/json")

        parts = urlsplit(url)
        request_headers.setdefault("host", parts.netloc)
        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "scheme": parts.scheme,
            "path": parts.path,
            "raw_path": parts.path.encode("latin-1"),
            "query_string": parts.query.encode("latin-1"),
            "root_path": "",
            "headers": [
                (name.encode("latin-1"), value.encode("latin-1"))
                for name, value in request_headers.items()
            ],
            "server": None,
            "client": ("127.0.0.1", 0),
        }

        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            return {"type": "http.disconnect"}

        messages: list[MutableMapping[str, Any]] = []

        async def send(message: MutableMapping[str, Any]) -> None:
            messages.append(message)

        with anyio.fail_after(self.timeout):
            await self.transport(scope, receive, send)

        return _build_response(messages)

    async def get(self, url: str, *, headers: dict[str, str] | None = None) -> Response:
        """Send a GET request."""
        return await self.request("GET", url, headers=headers)

    async def head(self, url: str, *, headers: dict[str, str] | None = None) -> Response:
        """Send a HEAD request."""
        return await self.request("HEAD", url, headers=headers)

    async def options(self, url: str, *, headers: dict[str, str] | None = None) -> Response:
        """Send an OPTIONS request."""
        return await self.request("OPTIONS", url, headers=headers)

    async def delete(self, url: str, *, headers: dict[str, str] | None = None) -> Response:
        """Send a DELETE request."""
        return await self.request("DELETE", url, headers=headers)

    async def post(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        json: Any = None,
    ) -> Response:
        """Send a POST request."""
        return await self.request("POST", url, headers=headers, body=body, json=json)

    async def put(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        json: Any = None,
    ) -> Response:
        """Send a PUT request."""
        return await self.request("PUT", url, headers=headers, body=body, json=json)

    async def patch(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        json: Any = None,
    ) -> Response:
        """Send a PATCH request."""
        return await self.request("PATCH", url, headers=headers, body=body, json=json)


def _build_response(messages: list[MutableMapping[str, Any]]) -> Response:
    """Reassemble the ASGI messages the transport sent into a Response."""
    status = 200
    content_type = ""
    headers: list[tuple[str, str]] = []
    body_parts: list[bytes] = []

    for message in messages:
        if message["type"] == "http.response.start":
            status = message["status"]
            for raw_name, raw_value in message.get("headers", []):
                name = raw_name.decode("latin-1")
                value = raw_value.decode("latin-1")
                if name == "content-type":
                    content_type = value
                else:
                    headers.append((name, value))
        elif message["type"] == "http.response.body":
            body_parts.append(message.get("body", b""))

    return Response(
        body=b"".join(body_parts),
        status=status,
        content_type=content_type,
        headers=tuple(headers),
    )
