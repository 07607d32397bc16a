"""Middleware for a stitch app.

See ``protocol`` for the calling convention. Included:
    PageShell -- Rewrite every HTML response into the shared site shell
    StaticFiles -- Serve a static site (pretty URLs, custom 404)
"""

from stitch.middleware.protocol import AnyResponse, Middleware, Next
from stitch.middleware.shell import PageShell
from stitch.middleware.static import StaticFiles

__all__ = [
    "AnyResponse",
    "Middleware",
    "Next",
    "PageShell",
    "StaticFiles",
]
