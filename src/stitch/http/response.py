"""HTTP responses with a chainable .with_*() transformation API.

Every ``with_*`` call returns a new object, so middleware can layer
headers onto an origin response without touching the original.
"""

from collections.abc import AsyncIterator, Iterator, Mapping
from dataclasses import dataclass, replace
from typing import Self


class _HeaderOps:
    """Header helpers shared by ``Response`` and ``StreamingResponse``.

    Header names compare case-insensitively; values are kept verbatim.
    """

    __slots__ = ()

    headers: tuple[tuple[str, str], ...]

    def with_status(self, status: int) -> Self:
        """Return a copy with a different status code."""
        return replace(self, status=status)  # type: ignore[type-var]

    def with_header(self, name: str, value: str) -> Self:
        """Return a copy with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))  # type: ignore[type-var]

    def with_headers(self, headers: Mapping[str, str]) -> Self:
        """Return a copy with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))  # type: ignore[type-var]

    def without_header(self, name: str) -> Self:
        """Return a copy with every *name* header removed."""
        lowered = name.lower()
        kept = tuple(pair for pair in self.headers if pair[0].lower() != lowered)
        return replace(self, headers=kept)  # type: ignore[type-var]

    def with_replaced_header(self, name: str, value: str) -> Self:
        """Return a copy where *name* has exactly one value: *value*."""
        return self.without_header(name).with_header(name, value)

    def with_content_type(self, content_type: str | None) -> Self:
        """Return a copy with a different content type."""
        return replace(self, content_type=content_type)  # type: ignore[type-var]

    def get_header(self, name: str, default: str | None = None) -> str | None:
        """First value of header *name*, or *default*."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default

    def has_header(self, name: str) -> bool:
        """True if header *name* is present."""
        return self.get_header(name) is not None


@dataclass(frozen=True, slots=True)
class Response(_HeaderOps):
    """An HTTP response built through immutable transformations.

    ``content_type=None`` means the origin did not declare one.
    ``body=None`` means headers only (HEAD): the sender emits no body
    and no Content-Length.
    """

    body: str | bytes | None = ""
    status: int = 200
    content_type: str | None = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes (empty for a headers-only response)."""
        if self.body is None:
            return b""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if self.body is None:
            return ""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


@dataclass(frozen=True, slots=True)
class StreamingResponse(_HeaderOps):
    """An HTTP response whose body is produced chunk by chunk.

    Used for chunked transfer encoding: headers are sent immediately,
    then each chunk is sent as an ASGI body message with ``more_body=True``.
    Supports the same ``.with_*()`` API as ``Response`` so middleware can
    modify headers/status without knowing the response is streamed.
    """

    chunks: Iterator[str | bytes] | AsyncIterator[str | bytes]
    status: int = 200
    content_type: str | None = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True, slots=True)
class Redirect:
    """A redirect response."""

    url: str
    status: int = 302
    headers: tuple[tuple[str, str], ...] = ()
