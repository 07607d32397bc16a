"""Example site — a static site served behind the page shell.

Every HTML page under ``public/`` gets the shared header and footer
partials, the site stylesheet, freshness stamps and cache validators
at serve time. CSS and other assets are served untouched.

Run:
    python app.py

or, equivalently:
    stitch serve examples/site/public --debug
"""

import os
from pathlib import Path

from stitch import AppConfig, create_app
from stitch.config import parse_build_time

PUBLIC_DIR = Path(__file__).parent / "public"

_build_time = os.environ.get("STITCH_BUILD_TIME")

app = create_app(
    AppConfig(
        site_dir=PUBLIC_DIR,
        not_found_page="404.html",
        build_time=parse_build_time(_build_time) if _build_time else None,
        debug=True,
    )
)


if __name__ == "__main__":
    app.run()
