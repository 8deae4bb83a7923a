"""Transport configuration.

TransportConfig is a frozen dataclass, immutable after creation, no
string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TransportConfig:
    """Scheme transport configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = TransportConfig(port=3000, default_scheme="app")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Scheme used when the ASGI scope's own scheme has no handler
    # (plain http traffic from a dev server, for instance)
    default_scheme: str | None = None

    # Reload (development mode)
    reload: bool = False
    reload_dirs: tuple[str, ...] = ()

    log_level: str = "info"
