"""``tinyrouter match``: try a method and path against a router.

Exits 1 when nothing matches, so it can be used in shell checks.
"""

import argparse
import sys

from tinyrouter.cli._resolve import resolve_router
from tinyrouter.cli._routes import handler_name
from tinyrouter.errors import ResolveError
from tinyrouter.routing.route import RouteMatch


def _print_match(match: RouteMatch) -> None:
    print(f"{match.method} {match.path}  ->  {handler_name(match.handler)}")
    for name, value in match.params.items():
        print(f"  {name} = {value!r}")


def run_match(args: argparse.Namespace) -> None:
    """Print the route(s) ``args.router`` selects for ``args.method`` ``args.path``."""
    try:
        router = resolve_router(args.router)
    except ResolveError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.all:
        matches = router.match_all(args.method, args.path)
    else:
        match = router.match(args.method, args.path)
        matches = [match] if match is not None else []

    if not matches:
        print(f"No route matches {args.method} {args.path!r}", file=sys.stderr)
        raise SystemExit(1)

    for match in matches:
        _print_match(match)
