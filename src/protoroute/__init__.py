"""protoroute — request routing for custom URL schemes.

Match ``app://records/user/42`` against patterns like
``/records/user/:id`` and run the first handler that answers.

Basic usage::

    from protoroute import Router, SchemeTransport

    router = Router().get("/records/user/:id", lambda target: {"id": target.params["id"]})

    transport = SchemeTransport()
    router.register(transport, "app")
    transport.run()

Several handlers may share a pattern; they are tried in registration
order until one returns a response.
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "ConfigurationError",
    "Context",
    "Failure",
    "HTTPError",
    "HttpMethod",
    "ProtoRouteError",
    "ProtocolProvider",
    "Request",
    "Response",
    "RouteRequest",
    "Router",
    "Scheme",
    "SchemeTransport",
    "ShortCircuit",
    "TransportConfig",
    "WILDCARD",
]

# name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "ConfigurationError": "protoroute.errors",
    "Context": "protoroute.routing.context",
    "Failure": "protoroute.routing.context",
    "HTTPError": "protoroute.errors",
    "HttpMethod": "protoroute.routing.methods",
    "ProtoRouteError": "protoroute.errors",
    "ProtocolProvider": "protoroute.provider",
    "Request": "protoroute.http.request",
    "Response": "protoroute.http.response",
    "RouteRequest": "protoroute.routing.route",
    "Router": "protoroute.routing.router",
    "Scheme": "protoroute.provider",
    "SchemeTransport": "protoroute.server.transport",
    "ShortCircuit": "protoroute.routing.context",
    "TransportConfig": "protoroute.config",
    "WILDCARD": "protoroute.routing.methods",
}


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import protoroute`` fast while providing a flat top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
