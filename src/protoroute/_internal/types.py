"""Shared type aliases used across protoroute modules."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from protoroute.http.request import Request
    from protoroute.http.response import Response

# Route handler: (target) or (target, context), sync or async
Handler: TypeAlias = Callable[..., Any]

# Context builder: (request) -> context value or ContextResult, sync or async
ContextBuilder: TypeAlias = Callable[["Request"], Any]

# What a transport invokes for every request on a scheme
SchemeHandler: TypeAlias = Callable[["Request"], Awaitable["Response"]]

# Lifecycle hook: no arguments, sync or async
Hook: TypeAlias = Callable[[], Any]
