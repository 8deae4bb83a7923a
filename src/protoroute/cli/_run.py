"""``protoroute run`` — serve a SchemeTransport with pounce."""

import argparse
import sys

from protoroute.cli._resolve import resolve
from protoroute.server.transport import SchemeTransport


def run_transport(args: argparse.Namespace) -> None:
    """Resolve ``args.transport`` and serve it until interrupted."""
    try:
        transport = resolve(args.transport, SchemeTransport, "transport")
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    transport.run(args.host, args.port, app_path=args.transport)
