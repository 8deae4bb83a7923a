"""Synthetic responses produced by the router and the transport.

The router manufactures exactly two responses of its own: the lookup
miss (404) and the exhausted-with-error response (500). The transport
adds plain-text responses for ``HTTPError`` and for handlers that crash
outside a router.
"""

import logging

from protoroute.errors import HTTPError
from protoroute.http.response import Response

logger = logging.getLogger("protoroute.server")


def not_found_response() -> Response:
    """404: no route produced a response and nothing failed."""
    return Response.from_json({"message": "Not found"}, status=404)


def describe_error(error: object) -> object:
    """The ``reason`` carried by an internal-error response.

    Exceptions are rendered as their message (or class name when the
    message is empty); other failure values pass through unchanged.
    """
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return error


def internal_error_response(error: object) -> Response:
    """500: every candidate was tried and at least one failed."""
    return Response.from_json(
        {"message": "Internal error", "reason": describe_error(error)},
        status=500,
    )


def http_error_response(exc: HTTPError) -> Response:
    """Map an HTTPError raised by the transport to a plain-text response."""
    logger.debug("%d %s", exc.status, exc.detail)
    response = Response(body=exc.detail or f"Error {exc.status}", status=exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def crash_response(exc: Exception, *, debug: bool) -> Response:
    """500 for a scheme handler that raised instead of returning a response."""
    if debug:
        return Response(body=f"Internal Server Error: {type(exc).__name__}: {exc}", status=500)
    return Response(body="Internal Server Error", status=500)
