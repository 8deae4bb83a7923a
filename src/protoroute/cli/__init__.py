"""protoroute CLI — route listing and dev server.

Entry point registered as ``protoroute`` in ``pyproject.toml``::

    [project.scripts]
    protoroute = "protoroute.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``protoroute`` command."""
    parser = argparse.ArgumentParser(
        prog="protoroute",
        description="protoroute: request routing for custom URL schemes.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- protoroute routes ------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List a router's routes")
    routes_parser.add_argument(
        "router",
        help="Import string (e.g. myapp:router)",
    )

    # -- protoroute run ---------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve a scheme transport")
    run_parser.add_argument(
        "transport",
        help="Import string (e.g. myapp:transport)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from protoroute.cli._routes import run_routes

        run_routes(args)
    elif args.command == "run":
        from protoroute.cli._run import run_transport

        run_transport(args)
