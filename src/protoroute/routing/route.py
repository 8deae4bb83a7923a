"""Route and RouteRequest frozen dataclasses."""

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from protoroute.http.request import Request
from protoroute.routing.methods import Bucket


@dataclass(frozen=True, slots=True)
class RouteRequest:
    """What a handler receives: the request plus its bound path parameters."""

    request: Request
    params: dict[str, str]


@dataclass(frozen=True, slots=True)
class Route:
    """A registered handler for one (method, pattern) pair.

    ``requires_context`` and ``accepts_context`` are read from the
    handler's signature once, at registration.
    """

    method: Bucket
    pattern: str
    handler: Callable[..., Any]
    requires_context: bool = False
    accepts_context: bool = False

    @classmethod
    def create(cls, method: Bucket, pattern: str, handler: Callable[..., Any]) -> "Route":
        requires, accepts = context_arity(handler)
        return cls(
            method=method,
            pattern=pattern,
            handler=handler,
            requires_context=requires,
            accepts_context=accepts,
        )

    @property
    def handler_name(self) -> str:
        return getattr(self.handler, "__qualname__", None) or repr(self.handler)


def context_arity(handler: Callable[..., Any]) -> tuple[bool, bool]:
    """Return ``(requires_context, accepts_context)`` for *handler*.

    A handler requires a context when it declares two or more positional
    parameters without defaults::

        def show(target, ctx): ...          # (True, True)
        def show(target, ctx=None): ...     # (False, True)
        def show(target): ...               # (False, False)
    """
    try:
        sig = inspect.signature(handler)
    except (TypeError, ValueError):
        return False, False

    required = 0
    positional = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return required >= 2, True
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional += 1
            if param.default is inspect.Parameter.empty:
                required += 1
    return required >= 2, positional >= 2
