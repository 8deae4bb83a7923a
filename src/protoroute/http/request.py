"""Immutable request.

Frozen metadata with async body access. The URL is kept verbatim;
``authority`` and ``path`` are derived from it on access.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import SplitResult, quote, urlsplit

from protoroute._internal.asgi import Receive, Scope
from protoroute.http.headers import Headers

# Percent-encoded dots count as dots (``%2e``, ``.%2E``, ...)
_SINGLE_DOT = frozenset({".", "%2e"})
_DOUBLE_DOT = frozenset({"..", ".%2e", "%2e.", "%2e%2e"})


def resolve_dot_segments(path: str) -> str:
    """Remove ``.`` and ``..`` segments from an absolute *path*.

    ``..`` drops the previous segment and never climbs above the root.
    A trailing ``.`` or ``..`` leaves a trailing slash, so ``/a/b/..``
    becomes ``/a/``. Other segments are kept verbatim.
    """
    if not path.startswith("/"):
        return path

    segments = path[1:].split("/")
    output: list[str] = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        lowered = segment.lower()
        if lowered in _DOUBLE_DOT:
            if output:
                output.pop()
            if last:
                output.append("")
        elif lowered in _SINGLE_DOT:
            if last:
                output.append("")
        else:
            output.append(segment)
    return "/" + "/".join(output)


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable request addressed to a URL, e.g. ``app://records/user/42``.

    Metadata (method, URL, headers) is frozen at creation.
    Body is read asynchronously via ``.body()``, ``.text()``, ``.json()``.
    """

    method: str
    url: str
    headers: Headers = field(default_factory=Headers)

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: mutable cache for the body
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- URL parts --

    @property
    def _parts(self) -> SplitResult:
        return urlsplit(self.url)

    @property
    def scheme(self) -> str:
        """The URL scheme, lower-cased (``app``)."""
        return self._parts.scheme

    @property
    def authority(self) -> str:
        """Host and optional port, without userinfo (``records``)."""
        return self._parts.netloc.rpartition("@")[2]

    @property
    def path(self) -> str:
        """The still percent-encoded path (``/user/42``).

        ``.`` and ``..`` segments are resolved: ``/a/../42`` is ``/42``.
        """
        return resolve_dot_segments(self._parts.path)

    @property
    def query(self) -> str:
        """The raw query string, without the ``?``."""
        return self._parts.query

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    def with_scheme(self, scheme: str) -> Request:
        """Return a copy addressed to the same URL under another scheme."""
        url = self._parts._replace(scheme=scheme).geturl()
        return replace(self, url=url, _cache=self._cache)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached. The ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" not in self._cache:
            self._cache["_body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["_body"]

    async def stream(self) -> AsyncGenerator[bytes]:
        """Yield the request body in chunks as they arrive."""
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(await self.body())

    # -- Factories --

    @classmethod
    def create(
        cls,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Request:
        """Build a request directly, without a transport.

        Useful for dispatching through a router in scripts and tests::

            response = await router.dispatch(Request.create("GET", "app://records/user/42"))
        """
        request = cls(method=method, url=url, headers=Headers(headers or {}))
        request._cache["_body"] = body
        return request

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI HTTP scope and receive callable.

        The URL is rebuilt from the scope's scheme, the ``Host`` header
        (or ``server`` pair), and the undecoded ``raw_path``.
        """
        headers = Headers.from_raw(scope.get("headers", ()))
        host = headers.get("host")
        if host is None:
            server = scope.get("server")
            host = f"{server[0]}:{server[1]}" if server else ""

        # Some servers include the query string in raw_path
        raw_path = scope.get("raw_path")
        if raw_path:
            path = raw_path.decode("latin-1").partition("?")[0]
        else:
            path = quote(scope.get("path", ""))

        url = f"{scope.get('scheme', 'http')}://{host}{path}"
        query_string = scope.get("query_string", b"")
        if query_string:
            url = f"{url}?{query_string.decode('latin-1')}"

        return cls(method=scope["method"], url=url, headers=headers, _receive=receive)
