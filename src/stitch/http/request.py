"""Immutable HTTP request built from an ASGI scope."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import Any

from stitch._internal.asgi import Receive
from stitch.http.headers import Headers


def _address(value: Any) -> tuple[str, int] | None:
    return (value[0], value[1]) if value else None


@dataclass(frozen=True, slots=True)
class Request:
    """One received request.

    Everything but the body is fixed at construction. Route handlers that
    need the body await ``body()``; the page shell only looks at method,
    path and headers.
    """

    method: str
    path: str
    headers: Headers
    query_string: bytes = b""
    path_params: dict[str, str] = field(default_factory=dict)
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None
    _receive: Receive | None = field(default=None, repr=False, compare=False)
    # Shared between copies so the body is read from ASGI at most once.
    _cache: dict[str, bytes] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: dict[str, Any], receive: Receive) -> Request:
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query_string=scope.get("query_string", b""),
            http_version=scope.get("http_version", "1.1"),
            server=_address(scope.get("server")),
            client=_address(scope.get("client")),
            _receive=receive,
        )

    @property
    def is_head(self) -> bool:
        return self.method == "HEAD"

    @property
    def url(self) -> str:
        """Path plus query string, as the client sent it."""
        query = self.query_string.decode("latin-1")
        return f"{self.path}?{query}" if query else self.path

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        return replace(self, path_params=path_params)

    async def body(self) -> bytes:
        """The whole request body, read once and cached."""
        if "body" not in self._cache:
            self._cache["body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["body"]

    async def stream(self) -> AsyncGenerator[bytes]:
        """Yield body chunks as they arrive."""
        if self._receive is None:
            return
        more = True
        while more:
            message = await self._receive()
            if chunk := message.get("body", b""):
                yield chunk
            more = message.get("more_body", False)
