"""Invoke helpers — call sync or async callables uniformly.

Route handlers, context builders, and lifecycle hooks can be ``def`` or
``async def``. Any code that calls one of them goes through ``invoke``
so the sync/async check lives in exactly one place.

Usage::

    from protoroute._internal.invoke import invoke

    result = await invoke(handler, target, context)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        def show(target):
            return {"id": target.params["id"]}

        async def show(target):
            record = await store.get(target.params["id"])
            return {"id": record.id}
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
