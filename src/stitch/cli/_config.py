"""Build an ``AppConfig`` from parsed CLI arguments."""

import argparse
import sys

from stitch.config import AppConfig, parse_build_time
from stitch.errors import ConfigurationError


def config_from_args(args: argparse.Namespace, **overrides: object) -> AppConfig:
    """Translate CLI flags into config. Exits with status 1 on bad input."""
    try:
        build_time = parse_build_time(args.build_time) if args.build_time else None
        config = AppConfig(
            site_dir=args.site_dir,
            assets_dir=args.assets_dir,
            assets_url=args.assets_url,
            build_time=build_time,
            **overrides,
        )
        config.validate()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    return config
