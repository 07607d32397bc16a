"""Shared fixtures: a small static site on disk."""

from datetime import UTC, datetime

import pytest

from stitch.app import App
from stitch.middleware.shell import PageShell
from stitch.middleware.static import StaticFiles
from stitch.shell.assets import AssetResolver, DirectoryAssetStore

FIXED_NOW = datetime(2025, 8, 27, 14, 3, 9, 120_000, tzinfo=UTC)

PAGE = """<!DOCTYPE html>
<html>
<head><title>{title}</title></head>
<body class="article">
<header><p>placeholder</p></header>
<main><h1>{title}</h1>
<p>Updated <time data-global-freshness datetime="2020-01-01">a while ago</time></p>
</main>
<script type="application/ld+json">{{"@type": "Article", "dateModified": "2020-01-01"}}</script>
<footer>placeholder</footer>
</body>
</html>
"""


@pytest.fixture
def site_dir(tmp_path):
    """A site with pretty URLs, a blog index, a 404 page and shell assets."""
    site = tmp_path / "public"
    site.mkdir()
    (site / "index.html").write_text(PAGE.format(title="Home"))
    (site / "costs.html").write_text(PAGE.format(title="Costs"))
    (site / "404.html").write_text(PAGE.format(title="Not Found"))
    (site / "data.json").write_text('{"ok": true}')
    (site / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")

    blog = site / "blog"
    blog.mkdir()
    (blog / "index.html").write_text(PAGE.format(title="Blog"))

    styles = site / "styles"
    styles.mkdir()
    (styles / "main.css").write_text("body { margin: 0; }")

    partials = site / "partials"
    partials.mkdir()
    (partials / "header.html").write_text(
        '<nav aria-label="Site"><a href="/">Home</a>'
        '<a href="/costs">Costs</a><a href="/blog/">Blog</a></nav>'
    )
    return site


@pytest.fixture
def shell_app(site_dir) -> App:
    """Static site behind the page shell, with a fixed clock."""
    app = App()
    app.add_middleware(PageShell(AssetResolver(DirectoryAssetStore(site_dir)), clock=lambda: FIXED_NOW))
    app.add_middleware(StaticFiles(site_dir, not_found_page="404.html"))
    return app
