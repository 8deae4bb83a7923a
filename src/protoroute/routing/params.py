"""Path segment matching and parameter decoding.

Patterns and request paths are both split on ``/`` and compared pairwise.
A pattern segment starting with ``:`` binds the request segment,
percent-decoded, under the name that follows the colon::

    match_segments(["", "user", ":id"], ["", "user", "42"])  -> {"id": "42"}
    match_segments(["", "user", ":id"], ["", "user"])        -> None
"""

import re
from urllib.parse import unquote

from protoroute.errors import ParamDecodeError
from protoroute.http.request import Request

PARAM_PREFIX = ":"

# A ``%`` not followed by two hex digits
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def split_pattern(pattern: str) -> list[str]:
    """Split a registered pattern into segments. No normalization."""
    return pattern.split("/")


def request_segments(request: Request) -> list[str]:
    """Segments of ``"/" + authority + path`` for *request*.

    The authority is treated as the first path segment, so
    ``app://records/user/42`` and a pattern ``/records/user/:id``
    line up segment for segment::

        ["", "records", "user", "42"]
    """
    return f"/{request.authority}{request.path}".split("/")


def decode_param(raw: str) -> str:
    """Percent-decode a parameter segment as UTF-8.

    Raises ``ParamDecodeError`` for malformed escapes (``%zz``) or
    byte sequences that are not valid UTF-8.
    """
    if _BAD_ESCAPE.search(raw):
        raise ParamDecodeError(raw)
    try:
        return unquote(raw, errors="strict")
    except UnicodeDecodeError as exc:
        raise ParamDecodeError(raw) from exc


def match_segments(pattern: list[str], path: list[str]) -> dict[str, str] | None:
    """Bind *path* against *pattern*, or return ``None`` if they differ.

    Segment counts must be equal. Literal segments compare exactly
    (case-sensitive, undecoded). Raises ``ParamDecodeError`` when a
    bound segment cannot be decoded.
    """
    if len(pattern) != len(path):
        return None

    params: dict[str, str] = {}
    for expected, actual in zip(pattern, path, strict=True):
        if expected.startswith(PARAM_PREFIX):
            params[expected[1:]] = decode_param(actual)
        elif expected != actual:
            return None
    return params
