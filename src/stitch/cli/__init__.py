"""Stitch CLI — serve a static site through the page shell, or render one page.

Entry point registered as ``stitch`` in ``pyproject.toml``::

    [project.scripts]
    stitch = "stitch.cli:main"
"""

import argparse
import os
import sys


def _add_site_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by every command that builds a site app."""
    parser.add_argument("site_dir", help="Directory of static pages to serve")
    assets = parser.add_mutually_exclusive_group()
    assets.add_argument(
        "--assets",
        dest="assets_dir",
        default=None,
        help="Directory holding partials and stylesheets (default: SITE_DIR)",
    )
    assets.add_argument(
        "--assets-url",
        default=None,
        help="HTTP origin holding partials and stylesheets",
    )
    parser.add_argument(
        "--build-time",
        default=os.environ.get("STITCH_BUILD_TIME"),
        help="ISO 8601 build instant used for Last-Modified (env: STITCH_BUILD_TIME)",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``stitch`` command."""
    parser = argparse.ArgumentParser(
        prog="stitch",
        description="Stitch — a serve-time HTML shell for static sites.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- stitch serve -----------------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Serve a site through the page shell")
    _add_site_arguments(serve_parser)
    serve_parser.add_argument("--host", default=None, help="Bind host address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    serve_parser.add_argument(
        "--debug",
        action="store_true",
        help="Single worker with auto-reload on site changes",
    )
    serve_parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Logging level (default: info)",
    )

    # -- stitch render ----------------------------------------------------
    render_parser = subparsers.add_parser(
        "render", help="Render one page in-process and print the result"
    )
    _add_site_arguments(render_parser)
    render_parser.add_argument("path", help="Request path (e.g. /costs/)")
    render_parser.add_argument(
        "--method",
        default="GET",
        choices=["GET", "HEAD"],
        help="Request method (default: GET)",
    )
    render_parser.add_argument(
        "--include-headers",
        action="store_true",
        help="Print the status line and response headers before the body",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from stitch.cli._serve import serve

        serve(args)
    elif args.command == "render":
        from stitch.cli._render import render

        render(args)
