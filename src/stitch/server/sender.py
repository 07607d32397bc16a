"""Writes stitch responses out as ASGI messages.

Three shapes: a complete body with Content-Length, headers only (a HEAD
reply, no length), and a chunked stream.
"""

import logging
from collections.abc import AsyncIterator, Iterable

from stitch._internal.asgi import Send
from stitch.http.response import Response, StreamingResponse

logger = logging.getLogger("stitch.server")

# Content-Type lives on the response object; Content-Length is recomputed here.
_MANAGED = frozenset({"content-type", "content-length"})


def _body_allowed(status: int) -> bool:
    """Whether *status* may carry a message body (not 1xx, 204 or 304)."""
    return status >= 200 and status not in (204, 304)


def _encode_headers(
    content_type: str | None, headers: tuple[tuple[str, str], ...]
) -> list[tuple[bytes, bytes]]:
    encoded = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in headers
        if name.lower() not in _MANAGED
    ]
    if content_type is not None:
        encoded.insert(0, (b"content-type", content_type.encode("latin-1")))
    return encoded


async def _start(send: Send, status: int, headers: list[tuple[bytes, bytes]]) -> None:
    await send({"type": "http.response.start", "status": status, "headers": headers})


async def _chunks(
    source: AsyncIterator[str | bytes] | Iterable[str | bytes],
) -> AsyncIterator[bytes]:
    """Normalize sync or async chunk sources to non-empty ``bytes``."""
    if isinstance(source, AsyncIterator):
        async for chunk in source:
            if chunk:
                yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk
    else:
        for chunk in source:
            if chunk:
                yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk


async def send_response(response: Response, send: Send) -> None:
    """Send *response* as one start message and one body message.

    A ``None`` body means headers only: Content-Length is left out since
    the length of a body that was never produced is unknown.
    """
    headers = _encode_headers(response.content_type, response.headers)
    body = b""
    if response.body is not None:
        if _body_allowed(response.status):
            body = response.body_bytes
        headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await _start(send, response.status, headers)
    await send({"type": "http.response.body", "body": body})


async def send_streaming_response(response: StreamingResponse, send: Send) -> None:
    """Send *response* with chunked transfer encoding.

    Headers go out first, then one ``more_body`` message per chunk and an
    empty closing message. An error mid-stream is logged and the stream is
    closed early, since the status line is already on the wire.
    """
    headers = _encode_headers(response.content_type, response.headers)
    headers.append((b"transfer-encoding", b"chunked"))
    await _start(send, response.status, headers)

    try:
        async for chunk in _chunks(response.chunks):
            await send({"type": "http.response.body", "body": chunk, "more_body": True})
    except Exception:
        logger.exception("error while streaming response body")

    await send({"type": "http.response.body", "body": b"", "more_body": False})
