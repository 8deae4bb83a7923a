"""protoroute exception hierarchy.

Shared across Router, transport, and provider so every module raises
and catches the same types.
"""

from dataclasses import dataclass


class ProtoRouteError(Exception):
    """Base for all protoroute-specific errors."""


class ConfigurationError(ProtoRouteError):
    """Raised when routing or transport setup is invalid.

    Typically raised by ``Router.register()`` when binding an empty
    router, or by the transport when a scheme is bound twice.
    """


class ParamDecodeError(ProtoRouteError, ValueError):
    """A ``:name`` path segment is not valid percent-encoded UTF-8."""

    def __init__(self, segment: str) -> None:
        self.segment = segment
        super().__init__(f"Cannot decode path parameter {segment!r}")


@dataclass(frozen=True, slots=True)
class HTTPError(ProtoRouteError):
    """An error that maps directly to an HTTP status code.

    Raised by the transport (e.g. for a scheme nobody handles) and
    converted to a plain-text response before it reaches the client.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class SchemeNotHandled(HTTPError):  # noqa: N818
    """404: no handler is installed for the request's scheme."""

    def __init__(self, scheme: str) -> None:
        super().__init__(status=404, detail=f"No handler for scheme {scheme!r}")
