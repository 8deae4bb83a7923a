"""Per-request context construction.

A router may be given a context builder: ``(request) -> value``, sync or
async. Its outcome is one of three tagged results, inspected explicitly
by the dispatcher:

- ``Context(value)``: pass *value* to the handler
- ``ShortCircuit(response)``: stop dispatching, return *response* as is
- ``Failure(error)``: context unavailable for this attempt

A builder may return ``ShortCircuit`` or ``Failure`` itself; any other
return value is wrapped in ``Context``, and any exception it raises
becomes ``Failure``::

    async def authenticate(request):
        token = request.headers.get("authorization")
        if token is None:
            return ShortCircuit(Response("Unauthorized", status=401))
        return await sessions.lookup(token)
"""

from dataclasses import dataclass
from typing import Any

from protoroute._internal.invoke import invoke
from protoroute._internal.types import ContextBuilder
from protoroute.http.request import Request
from protoroute.http.response import Response


@dataclass(frozen=True, slots=True)
class Context:
    value: Any


@dataclass(frozen=True, slots=True)
class ShortCircuit:
    response: Response


@dataclass(frozen=True, slots=True)
class Failure:
    error: Any


type ContextResult = Context | ShortCircuit | Failure


async def build_context(builder: ContextBuilder, request: Request) -> ContextResult:
    """Run *builder* for *request* and tag its outcome."""
    try:
        value = await invoke(builder, request)
    except Exception as exc:
        return Failure(exc)
    if isinstance(value, Context | ShortCircuit | Failure):
        return value
    return Context(value)
