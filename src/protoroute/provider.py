"""Provider facade — binds several (scheme, router) pairs to a transport.

Routers are built from factories, once per session, so every session
gets fresh route tables and fresh handler state.

Usage::

    provider = (
        ProtocolProvider(Scheme("app", standard=True, secure=True), make_app_router)
        .register(Scheme("media", stream=True), make_media_router)
    )
    provider.apply(transport)
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Self

from protoroute.routing.router import Router
from protoroute.server.transport import SchemeTransport

logger = logging.getLogger("protoroute.provider")

type RouterFactory = Callable[[], Router]


@dataclass(frozen=True, slots=True)
class Scheme:
    """A custom scheme and the privileges it is declared with.

    Only ``cors_enabled`` changes what the transport does (it adds
    ``Access-Control-Allow-Origin: *``); the other flags are recorded
    for hosts that enforce them.
    """

    name: str
    standard: bool = False
    secure: bool = False
    bypass_csp: bool = False
    allow_service_workers: bool = False
    support_fetch_api: bool = False
    cors_enabled: bool = False
    stream: bool = False
    code_cache: bool = False


class ProtocolProvider:
    """Collects (scheme, router factory) pairs and applies them together."""

    __slots__ = ("_scheme_routers",)

    def __init__(self, scheme: Scheme | str | None = None, router: RouterFactory | None = None) -> None:
        self._scheme_routers: list[tuple[Scheme, RouterFactory]] = []
        if scheme is not None and router is not None:
            self.register(scheme, router)

    def register(self, scheme: Scheme | str, router: RouterFactory) -> Self:
        """Add another scheme and the factory that builds its router."""
        if isinstance(scheme, str):
            scheme = Scheme(scheme)
        self._scheme_routers.append((scheme, router))
        return self

    @property
    def schemes(self) -> tuple[Scheme, ...]:
        """Every registered scheme, in registration order."""
        return tuple(scheme for scheme, _ in self._scheme_routers)

    def apply(self, transport: SchemeTransport) -> None:
        """Declare all schemes privileged and bind routers per session.

        Call once, after every scheme is registered and before the
        transport starts. Each session start builds a router from every
        factory and binds it; a router with no routes makes the startup
        fail with ``ConfigurationError``, after unbinding any scheme the
        same startup already bound. Session end unbinds them.
        """
        transport.declare_privileged(self.schemes)
        pairs = tuple(self._scheme_routers)

        def bind_routers() -> None:
            routers = [(scheme, factory()) for scheme, factory in pairs]
            bound: list[str] = []
            try:
                for scheme, router in routers:
                    router.register(transport, scheme.name)
                    bound.append(scheme.name)
            except Exception:
                # A failed session must leave no scheme behind
                for name in bound:
                    transport.unhandle(name)
                raise
            logger.debug("Bound %d scheme router(s)", len(pairs))

        def unbind_routers() -> None:
            for scheme, _ in pairs:
                transport.unhandle(scheme.name)

        transport.on_startup(bind_routers)
        transport.on_shutdown(unbind_routers)
