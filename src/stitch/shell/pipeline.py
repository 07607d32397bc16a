"""The shell's rewrite rules.

``build_rewriter()`` wires every rule onto one ``HTMLRewriter`` so the
whole page is rewritten in a single streaming pass. Each rule owns one
target and never relies on another rule having run first; within
``<head>`` the insertion order is primary stylesheet (or inline
fallback style), then the force-light stylesheet, then the updated-time
meta tag.

``rewrite_response()`` streams an origin response body through a
rewriter, decoding and re-encoding with the response's charset.
"""

import codecs
import re
from collections.abc import AsyncIterator
from dataclasses import dataclass
from html import escape

from stitch.http.response import Response, StreamingResponse
from stitch.shell.assets import ResolvedAssets
from stitch.shell.fragments import FALLBACK_FOOTER, FALLBACK_HEADER, FALLBACK_STYLE
from stitch.shell.freshness import Freshness
from stitch.shell.rewriter import Element, HTMLRewriter
from stitch.shell.route import RouteContext, normalize_path

_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class RewriteOptions:
    """Names the rules look for and write. Defaults match the site contract."""

    # <time data-global-freshness> gets the captured date
    freshness_attribute: str = "data-global-freshness"
    # JSON-LD blocks and the key whose string value is restamped
    structured_data_type: str = "application/ld+json"
    date_modified_key: str = "dateModified"
    # Header nav anchor matching the request path
    current_attribute: str = "aria-current"
    current_value: str = "page"
    # <body> stamping
    body_classes: tuple[str, ...] = ("force-light",)
    page_class_prefix: str = "page-"
    route_attribute: str = "data-route"
    # <head> stamping
    updated_meta_property: str = "og:updated_time"
    injected_attribute: str = "data-injected"


def date_modified_pattern(key: str) -> re.Pattern[str]:
    """Match ``"<key>": "<value>"`` with the value (escapes allowed) in group 2.

    Only double-quoted JSON strings match; whitespace around the colon
    is tolerated and preserved.
    """
    return re.compile(r'("' + re.escape(key) + r'"\s*:\s*")((?:[^"\\]|\\.)*)(")')


def stylesheet_link(href: str, options: RewriteOptions) -> str:
    return f'<link rel="stylesheet" href="{escape(href, quote=True)}" {options.injected_attribute}>'


def build_rewriter(
    assets: ResolvedAssets,
    route: RouteContext,
    freshness: Freshness,
    options: RewriteOptions | None = None,
) -> HTMLRewriter:
    """Build the one-pass rewriter for a single page.

    Header and footer fragments are run through the nav-marking and
    freshness rules before substitution, so the current-page mark and
    date stamps land on the markup that is actually served.
    """
    opts = options or RewriteOptions()
    date_pattern = date_modified_pattern(opts.date_modified_key)

    def inject_head(el: Element) -> None:
        if assets.stylesheet_href is not None:
            el.append(stylesheet_link(assets.stylesheet_href, opts))
        else:
            el.append(FALLBACK_STYLE)
        if assets.force_light_href is not None:
            el.append(stylesheet_link(assets.force_light_href, opts))
        el.append(
            f'<meta property="{escape(opts.updated_meta_property, quote=True)}" '
            f'content="{freshness.iso_instant}">'
        )

    def stamp_body(el: Element) -> None:
        existing = el.get_attribute("class") or ""
        added = [*opts.body_classes, f"{opts.page_class_prefix}{route.slug}"]
        el.set_attribute("class", " ".join([existing, *added]) if existing else " ".join(added))
        el.set_attribute(opts.route_attribute, route.slug)

    def mark_current(el: Element) -> None:
        href = el.get_attribute("href") or ""
        if normalize_path(href) == route.normalized_path:
            el.set_attribute(opts.current_attribute, opts.current_value)

    def stamp_time(el: Element) -> None:
        el.set_attribute("datetime", freshness.iso_date)
        el.set_inner_content(escape(freshness.human_date))

    def patch_structured_data(text: str) -> str | None:
        patched, count = date_pattern.subn(
            lambda m: f"{m.group(1)}{freshness.iso_date}{m.group(3)}", text
        )
        return patched if count else None

    time_selector = f"time[{opts.freshness_attribute}]"

    # Every <header> gets its children replaced, so current-page marks are
    # applied to the fragment here rather than to the page.
    header_fragment = (
        HTMLRewriter()
        .on("nav a", element=mark_current)
        .on(time_selector, element=stamp_time)
        .transform(assets.header or FALLBACK_HEADER)
    )
    footer_fragment = (
        HTMLRewriter()
        .on(time_selector, element=stamp_time)
        .transform(assets.footer or FALLBACK_FOOTER)
    )

    return (
        HTMLRewriter()
        .on("head", element=inject_head)
        .on("body", element=stamp_body)
        .on("header", element=lambda el: el.set_inner_content(header_fragment))
        .on("footer", element=lambda el: el.set_inner_content(footer_fragment))
        .on(time_selector, element=stamp_time)
        .on(f'script[type="{opts.structured_data_type}"]', text=patch_structured_data)
    )


def charset_of(content_type: str | None, default: str = "utf-8") -> str:
    """The codec named by a Content-Type ``charset`` parameter, if Python knows it."""
    for param in (content_type or "").split(";")[1:]:
        name, _, value = param.partition("=")
        if name.strip().lower() == "charset":
            charset = value.strip().strip('"').strip("'")
            try:
                return codecs.lookup(charset).name
            except LookupError:
                return default
    return default


async def body_chunks(response: Response | StreamingResponse) -> AsyncIterator[str | bytes]:
    """Yield an origin body piece by piece, whatever shape it arrived in."""
    if isinstance(response, Response):
        body = response.body or b""
        for start in range(0, len(body), _CHUNK_SIZE):
            yield body[start : start + _CHUNK_SIZE]
    elif isinstance(response.chunks, AsyncIterator):
        async for chunk in response.chunks:
            yield chunk
    else:
        for chunk in response.chunks:
            yield chunk


async def rewrite_chunks(
    chunks: AsyncIterator[str | bytes],
    rewriter: HTMLRewriter,
    charset: str,
) -> AsyncIterator[bytes]:
    """Decode, rewrite and re-encode a body stream in one pass."""
    decoder = codecs.getincrementaldecoder(charset)(errors="replace")
    session = rewriter.session()

    def encode(text: str) -> bytes:
        return text.encode(charset, errors="xmlcharrefreplace")

    async for chunk in chunks:
        text = chunk if isinstance(chunk, str) else decoder.decode(chunk)
        out = session.feed(text)
        if out:
            yield encode(out)
    out = session.feed(decoder.decode(b"", final=True)) + session.close()
    if out:
        yield encode(out)


def rewrite_response(
    response: Response | StreamingResponse, rewriter: HTMLRewriter
) -> StreamingResponse:
    """The origin response with its body streamed through *rewriter*.

    Status, content type and headers carry over unchanged; the body is
    not read until the returned response is iterated.
    """
    charset = charset_of(response.content_type)
    return StreamingResponse(
        chunks=rewrite_chunks(body_chunks(response), rewriter, charset),
        status=response.status,
        content_type=response.content_type,
        headers=response.headers,
    )
