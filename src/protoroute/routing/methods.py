"""HTTP methods a route can be registered for."""

from enum import StrEnum
from typing import Final, Literal


class HttpMethod(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"


# Bucket key for routes that answer any method
WILDCARD: Final = "*"

type Bucket = HttpMethod | Literal["*"]


def parse_method(value: str) -> HttpMethod | None:
    """Uppercase *value* and return the matching member, or ``None``.

    ``parse_method("get")`` -> ``HttpMethod.GET``; an unknown method
    such as ``"PROPFIND"`` returns ``None`` and can only reach
    wildcard routes.
    """
    try:
        return HttpMethod(value.upper())
    except ValueError:
        return None
