"""Route table and fallback dispatcher.

Routes are stored per method bucket (plus the ``*`` wildcard bucket),
keyed by the pattern string exactly as registered. Dispatch walks the
table in insertion order and tries every matching handler until one
produces a response.
"""

import logging
from collections.abc import Callable, Iterator
from typing import Self

from protoroute._internal.invoke import invoke
from protoroute._internal.types import ContextBuilder, Handler
from protoroute.errors import ConfigurationError
from protoroute.http.request import Request
from protoroute.http.response import Response
from protoroute.routing.context import Context, Failure, ShortCircuit, build_context
from protoroute.routing.methods import WILDCARD, Bucket, HttpMethod, parse_method
from protoroute.routing.params import match_segments, request_segments, split_pattern
from protoroute.routing.route import Route, RouteRequest
from protoroute.server.errors import internal_error_response, not_found_response
from protoroute.server.negotiation import negotiate
from protoroute.server.transport import Transport

logger = logging.getLogger("protoroute.routing")


class Router:
    """Route table plus the dispatcher that reads it.

    Usage::

        router = (
            Router(authenticate)
            .get("/records/user/:id", show_user)
            .get("/records/user/:id", show_public_profile)
            .on("/records/ping", ping)
        )
        router.register(transport, "app")

    Handlers registered under the same method and pattern form a fallback
    chain, tried in registration order. A handler that raises or returns
    ``None`` hands over to the next one; distinct patterns that match the
    same path are tried one after another as well.

    Thread safety:
        The table is only read during dispatch, so concurrent requests
        never race on it. Register all routes before serving. State that
        handlers share (an in-memory store, a cache) is not protected by
        the router; handlers must bring their own locks.
    """

    __slots__ = ("_context_builder", "_routes")

    def __init__(self, context_builder: ContextBuilder | None = None) -> None:
        self._context_builder = context_builder
        self._routes: dict[Bucket, dict[str, list[Route]]] = {}

    # -- Registration --

    def add(self, method: Bucket | str, pattern: str, handler: Handler) -> Self:
        """Append *handler* to the chain for (*method*, *pattern*).

        *method* is an ``HttpMethod``, a method name in any case, or
        ``"*"`` for every method.
        """
        bucket = self._bucket_for(method)
        route = Route.create(bucket, pattern, handler)
        self._routes.setdefault(bucket, {}).setdefault(pattern, []).append(route)
        return self

    def get(self, pattern: str, handler: Handler) -> Self:
        return self.add(HttpMethod.GET, pattern, handler)

    def post(self, pattern: str, handler: Handler) -> Self:
        return self.add(HttpMethod.POST, pattern, handler)

    def put(self, pattern: str, handler: Handler) -> Self:
        return self.add(HttpMethod.PUT, pattern, handler)

    def delete(self, pattern: str, handler: Handler) -> Self:
        return self.add(HttpMethod.DELETE, pattern, handler)

    def patch(self, pattern: str, handler: Handler) -> Self:
        return self.add(HttpMethod.PATCH, pattern, handler)

    def head(self, pattern: str, handler: Handler) -> Self:
        return self.add(HttpMethod.HEAD, pattern, handler)

    def options(self, pattern: str, handler: Handler) -> Self:
        return self.add(HttpMethod.OPTIONS, pattern, handler)

    def trace(self, pattern: str, handler: Handler) -> Self:
        return self.add(HttpMethod.TRACE, pattern, handler)

    def connect(self, pattern: str, handler: Handler) -> Self:
        return self.add(HttpMethod.CONNECT, pattern, handler)

    def on(self, pattern: str, handler: Handler) -> Self:
        """Register *handler* for *pattern* regardless of the request method."""
        return self.add(WILDCARD, pattern, handler)

    def route(
        self,
        pattern: str,
        *,
        method: Bucket | str = WILDCARD,
    ) -> Callable[[Handler], Handler]:
        """Decorator form of ``add()``; returns the function unchanged::

            @router.route("/records/user/:id", method="GET")
            async def show_user(target):
                ...
        """

        def decorator(func: Handler) -> Handler:
            self.add(method, pattern, func)
            return func

        return decorator

    @property
    def routes(self) -> list[Route]:
        """Every registered route, bucket by bucket, in registration order."""
        return [
            route
            for patterns in self._routes.values()
            for chain in patterns.values()
            for route in chain
        ]

    def __len__(self) -> int:
        return len(self.routes)

    # -- Binding --

    def register(self, transport: Transport, scheme: str) -> None:
        """Install this router as *transport*'s handler for *scheme*.

        Raises ``ConfigurationError`` and installs nothing when no
        handler has been registered.
        """
        if not self._routes:
            msg = (
                "No handlers have been registered. "
                "Add at least one route before binding the router to a scheme."
            )
            raise ConfigurationError(msg)
        transport.handle(scheme, self.dispatch)
        logger.info("Bound %d route(s) to scheme %r", len(self), scheme)

    # -- Dispatch --

    async def dispatch(self, request: Request) -> Response:
        """Find and run the handler chain for *request*.

        Never raises for handler or context failures: the result is the
        first response a handler produces, a short-circuit response from
        the context builder, or a synthetic 404/500.
        """
        # Only the most recent failure is reported; earlier ones are dropped.
        last_failure: Failure | None = None

        try:
            candidates = list(self._candidates(request))
        except Exception as exc:
            candidates = []
            last_failure = Failure(exc)

        for candidate in candidates:
            if isinstance(candidate, Failure):
                last_failure = candidate
                continue

            route, target = candidate
            try:
                result = await self._attempt(route, target)
            except Exception as exc:
                logger.debug(
                    "Handler %s failed for %s %s", route.handler_name, request.method, request.url,
                    exc_info=exc,
                )
                last_failure = Failure(exc)
                continue

            match result:
                case ShortCircuit(response=response):
                    logger.debug("Context builder short-circuited %s %s", request.method, request.url)
                    return response
                case Failure():
                    last_failure = result
                case Response():
                    return result
                case None:
                    pass

        if last_failure is not None:
            logger.warning(
                "500 %s %s: %s", request.method, request.url, last_failure.error,
            )
            return internal_error_response(last_failure.error)

        logger.debug("404 %s %s", request.method, request.url)
        return not_found_response()

    def _candidates(self, request: Request) -> Iterator[tuple[Route, RouteRequest] | Failure]:
        """Yield ``(route, target)`` for every handler whose pattern matches.

        Patterns whose parameters cannot be decoded yield a ``Failure``
        instead and are skipped.
        """
        method = parse_method(request.method)
        segments = request_segments(request)

        for bucket, patterns in self._routes.items():
            if bucket != WILDCARD and bucket != method:
                continue
            for pattern, chain in patterns.items():
                try:
                    params = match_segments(split_pattern(pattern), segments)
                except Exception as exc:
                    yield Failure(exc)
                    continue
                if params is None:
                    continue
                for route in chain:
                    yield route, RouteRequest(request=request, params=dict(params))

    async def _attempt(
        self,
        route: Route,
        target: RouteRequest,
    ) -> Response | ShortCircuit | Failure | None:
        """Run one handler, building its context first when configured."""
        if self._context_builder is None:
            return negotiate(await invoke(route.handler, target))

        outcome = await build_context(self._context_builder, target.request)
        match outcome:
            case ShortCircuit():
                return outcome
            case Failure():
                if route.requires_context:
                    return outcome
                return negotiate(await invoke(route.handler, target))
            case Context(value=value):
                if route.accepts_context:
                    return negotiate(await invoke(route.handler, target, value))
                return negotiate(await invoke(route.handler, target))

    @staticmethod
    def _bucket_for(method: Bucket | str) -> Bucket:
        if method == WILDCARD:
            return WILDCARD
        parsed = parse_method(method)
        if parsed is None:
            msg = f"Unknown HTTP method {method!r}. Use one of {', '.join(HttpMethod)} or '*'."
            raise ConfigurationError(msg)
        return parsed
