"""``tinyrouter routes``: list registered routes.

Prints every route with method, pattern, and handler, in the order
they are tried.
"""

import argparse
import sys

from tinyrouter.cli._resolve import resolve_router
from tinyrouter.errors import ResolveError


def handler_name(handler: object) -> str:
    return getattr(handler, "__name__", None) or repr(handler)


def run_routes(args: argparse.Namespace) -> None:
    """List registered routes for ``args.router`` as a table."""
    try:
        router = resolve_router(args.router)
    except ResolveError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = router.routes
    if not routes:
        print("No routes registered.")
        return

    rows = [(route.method, route.path, handler_name(route.handler)) for route in routes]

    max_method = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
    max_path = max(4, *(len(r[1]) for r in rows))  # "PATH" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER"))
    sep_len = max_method + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, path, name in rows:
        print(fmt.format(method, path, name))
