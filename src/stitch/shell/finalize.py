"""Response finalization — cache validators and shell headers.

Runs after every rewrite rule, so validators describe the bytes that
are actually sent. HEAD requests never materialize or hash the body.
"""

import hashlib
from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime

from stitch.http.request import Request
from stitch.http.response import Response, StreamingResponse
from stitch.shell.freshness import Freshness, http_date


@dataclass(frozen=True, slots=True)
class FinalizeOptions:
    """Header policy applied to every rewritten page."""

    debug_marker: tuple[str, str] = ("X-Stitch-Injected", "1")
    # Cacheable, but revalidated on every use
    cache_control: str = "public, max-age=0, must-revalidate"
    # Defaults, only used when the origin sent none
    referrer_policy: str = "strict-origin-when-cross-origin"
    content_type: str = "text/html; charset=utf-8"
    # Externally supplied build/commit instant for Last-Modified
    build_time: datetime | None = None
    etag_length: int = 16


def weak_etag(body: bytes, length: int = 16) -> str:
    """``W/"<hex>"`` over *body*: a fixed-length prefix of its SHA-256."""
    return f'W/"{hashlib.sha256(body).hexdigest()[:length]}"'


def etag_matches(if_none_match: str, etag: str) -> bool:
    """Weak comparison of *etag* against an ``If-None-Match`` header value."""
    candidate = etag.removeprefix("W/")
    for tag in if_none_match.split(","):
        tag = tag.strip()
        if tag == "*" or tag.removeprefix("W/") == candidate:
            return True
    return False


async def materialize(response: Response | StreamingResponse) -> bytes:
    """Read a response body to the end, exactly once."""
    if isinstance(response, Response):
        return response.body_bytes
    parts: list[bytes] = []
    if isinstance(response.chunks, AsyncIterator):
        async for chunk in response.chunks:
            parts.append(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)
    else:
        for chunk in response.chunks:
            parts.append(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)
    return b"".join(parts)


async def finalize(
    request: Request,
    response: Response | StreamingResponse,
    freshness: Freshness,
    options: FinalizeOptions | None = None,
) -> Response:
    """Turn the rewritten response into the one that is sent.

    - sets the debug marker, Cache-Control and Last-Modified
    - defaults Referrer-Policy and Content-Type only when absent
    - HEAD: headers only, status preserved, no body read, no ETag
    - otherwise: body read once, weak ETag over the exact bytes
      (replacing any origin validator), 304 when If-None-Match matches
    """
    opts = options or FinalizeOptions()
    marker_name, marker_value = opts.debug_marker
    last_modified = opts.build_time if opts.build_time is not None else freshness.instant

    headed = (
        response.with_replaced_header(marker_name, marker_value)
        .with_replaced_header("Cache-Control", opts.cache_control)
        .with_replaced_header("Last-Modified", http_date(last_modified))
    )
    if not headed.has_header("Referrer-Policy"):
        headed = headed.with_header("Referrer-Policy", opts.referrer_policy)
    content_type = (
        headed.content_type or headed.get_header("Content-Type") or opts.content_type
    )

    if request.is_head:
        return Response(
            body=None,
            status=headed.status,
            content_type=content_type,
            headers=headed.without_header("ETag").headers,
        )

    body = await materialize(headed)
    etag = weak_etag(body, opts.etag_length)
    headers = headed.with_replaced_header("ETag", etag).headers

    if_none_match = request.headers.get("if-none-match")
    if headed.status == 200 and if_none_match and etag_matches(if_none_match, etag):
        return Response(body=None, status=304, content_type=content_type, headers=headers)

    return Response(body=body, status=headed.status, content_type=content_type, headers=headers)
