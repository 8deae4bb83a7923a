"""Scheme transport — an ASGI application that routes by URL scheme.

The only component that touches raw ASGI directly. Converts scope dicts
to Request objects, hands them to the handler installed for the
request's scheme, and sends the Response back through ASGI ``send()``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Protocol

from protoroute._internal.asgi import Receive, Scope, Send
from protoroute._internal.invoke import invoke
from protoroute._internal.types import Hook, SchemeHandler
from protoroute.config import TransportConfig
from protoroute.errors import ConfigurationError, HTTPError, SchemeNotHandled
from protoroute.http.request import Request
from protoroute.http.response import Response
from protoroute.server.errors import crash_response, http_error_response
from protoroute.server.negotiation import negotiate
from protoroute.server.sender import send_response

if TYPE_CHECKING:
    from protoroute.provider import Scheme

logger = logging.getLogger("protoroute.server")


class Transport(Protocol):
    """Anything a router can be bound to.

    ``Router.register(transport, scheme)`` only needs ``handle``.
    """

    def handle(self, scheme: str, handler: SchemeHandler) -> None: ...


class SchemeTransport:
    """ASGI application holding one handler per URL scheme.

    Usage::

        transport = SchemeTransport(TransportConfig(default_scheme="app"))
        router.register(transport, "app")
        transport.run()

    Each ASGI lifespan startup opens a session: startup hooks run in
    registration order and are where providers bind their routers.
    Shutdown hooks run when the session ends.

    Thread safety:
        ``handle`` and ``unhandle`` take a lock, so hooks running on
        different worker threads cannot corrupt the scheme table.
    """

    __slots__ = (
        "_handlers",
        "_lock",
        "_privileged",
        "_shutdown_hooks",
        "_started",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: TransportConfig | None = None) -> None:
        self.config: TransportConfig = config or TransportConfig()
        self._handlers: dict[str, SchemeHandler] = {}
        self._privileged: dict[str, Scheme] = {}
        self._startup_hooks: list[Hook] = []
        self._shutdown_hooks: list[Hook] = []
        self._started: bool = False
        self._lock: threading.Lock = threading.Lock()

    # -- Scheme table --

    def handle(self, scheme: str, handler: SchemeHandler) -> None:
        """Install *handler* for every request on *scheme*.

        Raises ``ConfigurationError`` if the scheme is already handled;
        call ``unhandle()`` first to replace it.
        """
        key = scheme.lower()
        with self._lock:
            if key in self._handlers:
                msg = f"Scheme {scheme!r} is already handled. Call unhandle() before rebinding it."
                raise ConfigurationError(msg)
            self._handlers[key] = handler
        logger.info("Handling scheme %r", key)

    def unhandle(self, scheme: str) -> None:
        """Remove the handler for *scheme*, if any."""
        with self._lock:
            self._handlers.pop(scheme.lower(), None)

    def is_handled(self, scheme: str) -> bool:
        return scheme.lower() in self._handlers

    @property
    def schemes(self) -> tuple[str, ...]:
        """Schemes that currently have a handler, in binding order."""
        return tuple(self._handlers)

    # -- Privileged schemes --

    def declare_privileged(self, schemes: Iterable[Scheme]) -> None:
        """Record privilege flags for *schemes*.

        Must happen before the first session starts.
        """
        if self._started:
            msg = "Privileged schemes must be declared before the transport starts."
            raise ConfigurationError(msg)
        for scheme in schemes:
            self._privileged[scheme.name.lower()] = scheme

    def privileged(self, scheme: str) -> Scheme | None:
        """The declared ``Scheme`` for *scheme*, or ``None``."""
        return self._privileged.get(scheme.lower())

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a sync or async hook run when a session starts.

        Usage::

            @transport.on_startup
            async def open_store():
                await store.connect()
        """
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a sync or async hook run when a session ends."""
        self._shutdown_hooks.append(func)
        return func

    async def startup(self) -> None:
        """Start a session: run startup hooks in registration order.

        If a hook raises, the transport is left unstarted and the error
        propagates.
        """
        self._started = True
        try:
            for hook in self._startup_hooks:
                await invoke(hook)
        except Exception:
            self._started = False
            raise

    async def shutdown(self) -> None:
        """End the session: run shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            await invoke(hook)
        self._started = False

    # -- Request handling --

    async def handle_request(self, request: Request) -> Response:
        """Route *request* to its scheme's handler and return the response.

        Never raises: transport errors become plain-text responses.
        """
        try:
            scheme, handler = self._resolve(request.scheme)
            if scheme != request.scheme:
                request = request.with_scheme(scheme)
            response = negotiate(await invoke(handler, request))
            if response is None:
                raise HTTPError(status=404, detail="No response")
        except HTTPError as exc:
            return http_error_response(exc)
        except Exception as exc:
            logger.exception("500 %s %s", request.method, request.url)
            return crash_response(exc, debug=self.config.debug)

        declared = self.privileged(scheme)
        if declared is not None and declared.cors_enabled:
            response = response.with_header("Access-Control-Allow-Origin", "*")
        return response

    def _resolve(self, scheme: str) -> tuple[str, SchemeHandler]:
        handler = self._handlers.get(scheme)
        if handler is not None:
            return scheme, handler
        fallback = self.config.default_scheme
        if fallback is not None and fallback.lower() in self._handlers:
            return fallback.lower(), self._handlers[fallback.lower()]
        raise SchemeNotHandled(scheme)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly and HTTP scopes through
        ``handle_request``. Other scope types are ignored.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        response = await self.handle_request(request)
        await send_response(response, send, head=request.method.upper() == "HEAD")

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol around startup/shutdown hooks."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Server --

    def run(
        self,
        host: str | None = None,
        port: int | None = None,
        *,
        app_path: str | None = None,
    ) -> None:
        """Serve this transport with pounce (``pip install protoroute[server]``)."""
        from protoroute.server.dev import run_server

        run_server(self, self.config, host=host, port=port, app_path=app_path)
