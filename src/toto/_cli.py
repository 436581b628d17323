"""Toto CLI: toto routes / toto serve.

Entry point for the ``toto`` command-line interface.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING

from toto._errors import ConfigurationError

if TYPE_CHECKING:
    from toto.app import BoundRoute


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the toto CLI."""
    parser = argparse.ArgumentParser(
        prog="toto",
        description="Tab and object based site structure for Chirp apps.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each added route")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # toto routes
    routes_parser = subparsers.add_parser(
        "routes",
        help="Print the generated route table",
    )
    routes_parser.add_argument("root", nargs="?", default=".", help="App root directory")
    routes_parser.add_argument("--prefix", default=None, help="Route prefix")

    # toto serve
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the app described by toto.yaml",
    )
    serve_parser.add_argument("root", nargs="?", default=".", help="App root directory")
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port")
    serve_parser.add_argument("--prefix", default=None, help="Route prefix")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from toto import __version__

    return __version__


def format_routes(routes: tuple[BoundRoute, ...]) -> str:
    """Render bound routes as an aligned text table."""
    rows: list[tuple[str, str, str]] = []
    for route in routes:
        desc = route.descriptor
        if desc.is_redirect:
            target = f"-> {desc.redirect_to}"
        elif route.handler is not None:
            target = f"{desc.arity}  {route.handler.__qualname__}"
        else:
            target = f"{desc.arity}  {route.template.name}"
        rows.append((desc.path, desc.name, target))

    width_path = max((len(r[0]) for r in rows), default=0)
    width_name = max((len(r[1]) for r in rows), default=0)
    return "\n".join(
        f"GET  {path:<{width_path}}  {name:<{width_name}}  {target}"
        for path, name, target in rows
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from toto.app import load_app, serve

    try:
        if args.command == "routes":
            plugin, _app = load_app(args.root, prefix=args.prefix)
            print(format_routes(plugin.routes))
        elif args.command == "serve":
            serve(args.root, host=args.host, port=args.port, prefix=args.prefix)
    except ConfigurationError as exc:
        print(f"toto: {exc}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
