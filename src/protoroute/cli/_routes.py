"""``protoroute routes`` — print a router's table in dispatch order."""

import argparse
import sys

from protoroute.cli._resolve import resolve
from protoroute.routing.router import Router


def run_routes(args: argparse.Namespace) -> None:
    """Print METHOD, PATTERN, and HANDLER for every route of ``args.router``."""
    try:
        router = resolve(args.router, Router, "router")
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = router.routes
    if not routes:
        print("No routes registered.")
        return

    rows = [(str(route.method), route.pattern, route.handler_name) for route in routes]

    max_method = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
    max_pattern = max(7, *(len(r[1]) for r in rows))  # "PATTERN" header

    fmt = f"{{:<{max_method}}}  {{:<{max_pattern}}}  {{}}"
    print(fmt.format("METHOD", "PATTERN", "HANDLER"))
    sep_len = max_method + max_pattern + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, pattern, handler_name in rows:
        print(fmt.format(method, pattern, handler_name))
