"""``stitch serve`` — run the site behind the page shell with pounce."""

import argparse
import logging

from stitch.cli._config import config_from_args
from stitch.site import create_app


def serve(args: argparse.Namespace) -> None:
    """Start the server for ``args.site_dir``.

    ``--debug`` runs a single auto-reloading worker that watches the site
    directory; otherwise pounce picks the worker count.
    """
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, object] = {"debug": args.debug, "log_level": args.log_level}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port

    config = config_from_args(args, **overrides)
    app = create_app(config)
    app.run()
