"""Serve a scheme transport with pounce.

Pounce is an optional dependency (``pip install protoroute[server]``).
"""

from protoroute.config import TransportConfig


def run_server(
    transport: object,
    config: TransportConfig,
    *,
    host: str | None = None,
    port: int | None = None,
    app_path: str | None = None,
) -> None:
    """Start a single-worker pounce server for *transport*.

    Pounce's ``run()`` takes an import string, but we hold a live
    transport object, so ``pounce.Server`` is driven directly with the
    ASGI callable.

    Args:
        transport: ASGI callable (a ``SchemeTransport``).
        config: Supplies defaults for host, port, and reload settings.
        host: Override bind host.
        port: Override bind port.
        app_path: Optional ``"module:attribute"`` import string, letting
            pounce reimport the transport on each reload cycle.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    server_config = ServerConfig(
        host=host or config.host,
        port=port or config.port,
        workers=1,
        reload=config.reload,
        reload_dirs=config.reload_dirs,
        log_level=config.log_level,
    )
    Server(server_config, transport, app_path=app_path).run()
