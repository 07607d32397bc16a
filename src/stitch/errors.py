"""Errors raised across stitch.

``AssetUnavailable`` never reaches a client: the asset resolver turns it
into "absent" and the page gets fallback markup. ``HTTPError`` and its
subclasses become plain responses in the ASGI handler.
"""

from dataclasses import dataclass


class StitchError(Exception):
    """Root of the stitch exception tree."""


class ConfigurationError(StitchError):
    """Settings that cannot produce a working app, reported at startup."""


class AssetUnavailable(StitchError):  # noqa: N818
    """A content store had nothing usable for *path*."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}" if reason else path)


@dataclass(frozen=True, slots=True)
class HTTPError(StitchError):
    """Ends the request with *status*; *headers* go on the error response."""

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        return f"{self.status}: {self.detail}" if self.detail else str(self.status)


class NotFound(HTTPError):  # noqa: N818
    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(404, detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """The path is routed, the method is not. Carries ``Allow``."""

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow = ", ".join(sorted(allowed))
        detail = detail or f"Method not allowed. Allowed methods: {allow}"
        super().__init__(405, detail, (("Allow", allow),))
