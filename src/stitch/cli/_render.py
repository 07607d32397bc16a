"""``stitch render`` — run one request through the site app in-process.

Useful for checking what the shell does to a page without starting a
server::

    stitch render public /costs/ --include-headers
"""

import argparse
import asyncio
import sys

from stitch.cli._config import config_from_args
from stitch.http.response import Response
from stitch.site import create_app
from stitch.testing.client import TestClient


async def _fetch(args: argparse.Namespace) -> Response:
    app = create_app(config_from_args(args))
    async with TestClient(app) as client:
        return await client.request(args.method, args.path)


def render(args: argparse.Namespace) -> None:
    """Print the rewritten page (and optionally its headers) to stdout.

    Exits with status 1 when the response is not a success.
    """
    response = asyncio.run(_fetch(args))

    if args.include_headers:
        print(f"HTTP/1.1 {response.status}")
        if response.content_type is not None:
            print(f"content-type: {response.content_type}")
        for name, value in response.headers:
            print(f"{name}: {value}")
        print()

    if response.body is not None:
        sys.stdout.write(response.text)
        sys.stdout.flush()

    if response.status >= 400:
        raise SystemExit(1)
