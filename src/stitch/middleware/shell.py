"""Site shell middleware.

Rewrites every ``text/html`` response into the shared site shell:
header/footer partials, stylesheet links, freshness stamps, JSON-LD
``dateModified``, body route classes, and cache validators.

Everything else (CSS, images, JSON, ...) passes through untouched,
before any asset lookup is issued.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from stitch.http.request import Request
from stitch.http.response import Response, StreamingResponse
from stitch.middleware.protocol import AnyResponse, Next
from stitch.shell.assets import AssetResolver
from stitch.shell.finalize import FinalizeOptions, finalize, materialize
from stitch.shell.freshness import Freshness
from stitch.shell.pipeline import RewriteOptions, build_rewriter, rewrite_response
from stitch.shell.route import derive_route

logger = logging.getLogger("stitch.shell")


def is_html(response: AnyResponse) -> bool:
    """True if the response declares an HTML content type."""
    content_type = response.content_type or response.get_header("Content-Type") or ""
    return "text/html" in content_type.lower()


class PageShell:
    """Middleware that wraps HTML pages in the shared site shell.

    Usage::

        resolver = AssetResolver(DirectoryAssetStore("public"))
        app.add_middleware(PageShell(resolver))
        app.add_middleware(StaticFiles("public", not_found_page="404.html"))

    Add it before ``StaticFiles`` so it wraps the static origin. HTML
    error pages (a custom 404) are rewritten like any other page.

    Each request gets its own resolved assets, route and captured
    instant; the middleware itself holds no per-request state.
    """

    __slots__ = ("_clock", "_finalize_options", "_resolver", "_rewrite_options")

    def __init__(
        self,
        resolver: AssetResolver,
        *,
        rewrite_options: RewriteOptions | None = None,
        finalize_options: FinalizeOptions | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._resolver = resolver
        self._rewrite_options = rewrite_options or RewriteOptions()
        self._finalize_options = finalize_options or FinalizeOptions()
        self._clock = clock

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        """Rewrite HTML responses; pass everything else through."""
        response = await next(request)
        if not is_html(response):
            return response

        freshness = Freshness.capture(self._clock() if self._clock is not None else None)

        if request.is_head:
            # No body goes out, so there is nothing to rewrite or resolve.
            return await finalize(request, response, freshness, self._finalize_options)

        # Buffer a streamed origin so a failed rewrite can still serve it.
        if isinstance(response, StreamingResponse):
            response = Response(
                body=await materialize(response),
                status=response.status,
                content_type=response.content_type,
                headers=response.headers,
            )

        try:
            assets = await self._resolver.resolve()
            rewriter = build_rewriter(
                assets, derive_route(request.path), freshness, self._rewrite_options
            )
            return await finalize(
                request,
                rewrite_response(response, rewriter),
                freshness,
                self._finalize_options,
            )
        except Exception:
            logger.exception(
                "shell rewrite failed for %s %s; serving the origin page",
                request.method,
                request.path,
            )
            return response
