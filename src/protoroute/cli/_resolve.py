"""Import resolution — turns ``"module:attribute"`` strings into objects.

Shared by ``protoroute routes`` and ``protoroute run``.
"""

import importlib
from typing import Any


def resolve(import_string: str, expected: type, default_attr: str) -> Any:
    """Resolve *import_string* to an instance of *expected*.

    Accepts ``"module:attribute"``; without ``:attribute`` the
    *default_attr* is used (``"myapp"`` -> ``myapp.router``). A callable
    that is not already an *expected* instance is treated as a factory
    and called with no arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the result is not an *expected* instance, or a
            factory raised.
    """
    module_path, _, attr_name = import_string.partition(":")
    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name or default_attr)

    if callable(obj) and not isinstance(obj, expected):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, expected):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a {expected.__name__}"
        raise TypeError(msg)
    return obj
