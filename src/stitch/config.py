"""Application configuration.

One frozen dataclass covers the server, the origin directory, the content
store for partials and the build instant. The CLI builds it from flags.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from stitch.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(site_dir="public", port=3000)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str = "info"

    # Origin: the static site being served
    site_dir: str | Path = "public"
    index: str = "index.html"
    not_found_page: str | None = "404.html"
    static_cache_control: str = "no-cache"

    # Content store for partials and stylesheets. Exactly one of these is
    # used: an HTTP asset origin wins over a directory when both are set.
    # When neither is set, assets are read from ``site_dir``.
    assets_dir: str | Path | None = None
    assets_url: str | None = None
    assets_timeout: float = 5.0

    # Build metadata, feeds Last-Modified when present
    build_time: datetime | None = None

    # Response marker for debugging which responses went through the shell
    debug_marker: tuple[str, str] = ("X-Stitch-Injected", "1")

    def validate(self) -> None:
        """Raise ``ConfigurationError`` for settings that cannot work."""
        if not 0 < self.port < 65536:
            msg = f"port must be between 1 and 65535, got {self.port}"
            raise ConfigurationError(msg)
        if not Path(self.site_dir).is_dir():
            msg = f"site_dir {str(self.site_dir)!r} is not a directory"
            raise ConfigurationError(msg)
        if self.assets_dir is not None and not Path(self.assets_dir).is_dir():
            msg = f"assets_dir {str(self.assets_dir)!r} is not a directory"
            raise ConfigurationError(msg)
        if self.assets_url is not None and not self.assets_url.startswith(
            ("http://", "https://")
        ):
            msg = f"assets_url must be an http(s) URL, got {self.assets_url!r}"
            raise ConfigurationError(msg)


def parse_build_time(value: str) -> datetime:
    """Parse an ISO 8601 build/commit instant (``Z`` suffix accepted).

    Raises ``ConfigurationError`` when *value* is not a valid timestamp.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        msg = f"invalid build time {value!r}: expected ISO 8601"
        raise ConfigurationError(msg) from exc
