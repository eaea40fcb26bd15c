"""Tinyrouter CLI: inspect and try out a router from the shell.

Entry point registered as ``tinyrouter`` in ``pyproject.toml``::

    [project.scripts]
    tinyrouter = "tinyrouter.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``tinyrouter`` command."""
    parser = argparse.ArgumentParser(
        prog="tinyrouter",
        description="tinyrouter: a tiny request router.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- tinyrouter routes ------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "router",
        help="Import string (e.g. myapp.routes:router)",
    )

    # -- tinyrouter match -------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Match a method and path against a router")
    match_parser.add_argument(
        "router",
        help="Import string (e.g. myapp.routes:router)",
    )
    match_parser.add_argument("method", help="HTTP method (e.g. GET)")
    match_parser.add_argument("path", help="Request path (e.g. /users/42)")
    match_parser.add_argument(
        "--all",
        action="store_true",
        help="Show every matching route instead of the first",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from tinyrouter.cli._routes import run_routes

        run_routes(args)
    elif args.command == "match":
        from tinyrouter.cli._match import run_match

        run_match(args)
