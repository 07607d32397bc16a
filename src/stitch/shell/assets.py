"""Asset resolution — partials and stylesheets for the site shell.

Assets live in a content store addressed by logical path
(``/partials/header.html``). Stores are never routed through the site
app itself, so resolving an asset cannot re-enter the shell.

Lookups are fail-soft: any store failure means "absent" and the page
falls back to built-in markup. Existence is simply "payload present".
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import anyio
import httpx

from stitch.errors import AssetUnavailable

logger = logging.getLogger("stitch.shell")

HEADER_PARTIAL = "/partials/header.html"
FOOTER_PARTIAL = "/partials/footer.html"
PRIMARY_STYLESHEETS = ("/styles/main.css", "/styles/main")
FORCE_LIGHT_STYLESHEET = "/styles/force-light.css"


class AssetStore(Protocol):
    """Read-only content store keyed by logical path.

    Returns the payload text, or raises ``AssetUnavailable``.
    """

    async def get(self, path: str) -> str: ...


class MemoryAssetStore:
    """In-process store backed by a mapping of logical path to text."""

    __slots__ = ("_assets",)

    def __init__(self, assets: Mapping[str, str] | None = None) -> None:
        self._assets = dict(assets or {})

    async def get(self, path: str) -> str:
        try:
            return self._assets[path]
        except KeyError:
            raise AssetUnavailable(path, "not found") from None


class DirectoryAssetStore:
    """Store backed by a directory; ``/partials/x.html`` is ``<dir>/partials/x.html``.

    Paths that resolve outside the directory are unavailable.
    """

    __slots__ = ("_directory",)

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory).resolve()

    async def get(self, path: str) -> str:
        target = (self._directory / path.lstrip("/")).resolve()
        if not target.is_relative_to(self._directory):
            raise AssetUnavailable(path, "outside the asset directory")
        try:
            return await anyio.Path(target).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise AssetUnavailable(path, str(exc)) from exc


class HTTPAssetStore:
    """Store backed by a separate HTTP asset origin.

    Usage::

        store = HTTPAssetStore("https://assets.example.com")
        header = await store.get("/partials/header.html")

    The asset origin must not be the site itself, or lookups would run
    through the shell again.
    """

    __slots__ = ("_base_url", "_client", "_timeout")

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 5.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client
        self._timeout = timeout

    async def get(self, path: str) -> str:
        url = f"{self._base_url}{path}"
        try:
            if self._client is not None:
                response = await self._client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url)
        except httpx.HTTPError as exc:
            raise AssetUnavailable(path, str(exc)) from exc
        if not response.is_success:
            raise AssetUnavailable(path, f"HTTP {response.status_code}")
        return response.text

    async def aclose(self) -> None:
        """Close the injected client, if any."""
        if self._client is not None:
            await self._client.aclose()


@dataclass(frozen=True, slots=True)
class ResolvedAssets:
    """Everything the rewrite rules need from the content store.

    ``None`` means the asset is absent and the built-in fallback applies.
    """

    header: str | None = None
    footer: str | None = None
    stylesheet_href: str | None = None
    force_light_href: str | None = None


class AssetResolver:
    """Fail-soft front for an ``AssetStore``.

    Usage::

        resolver = AssetResolver(DirectoryAssetStore("public"))
        assets = await resolver.resolve()
    """

    __slots__ = ("_store",)

    def __init__(self, store: AssetStore) -> None:
        self._store = store

    @property
    def store(self) -> AssetStore:
        return self._store

    async def get(self, path: str) -> str | None:
        """Return the payload at *path*, or ``None`` if it cannot be had."""
        try:
            return await self._store.get(path)
        except AssetUnavailable as exc:
            logger.debug("asset %s unavailable: %s", path, exc.reason or "no reason given")
        except Exception:
            logger.warning("asset store failed for %s", path, exc_info=True)
        return None

    async def resolve(self) -> ResolvedAssets:
        """Probe every shell asset concurrently.

        All probes finish (successfully or via fallback) before this
        returns, so the streaming pass never waits on I/O.
        """
        paths = (HEADER_PARTIAL, FOOTER_PARTIAL, *PRIMARY_STYLESHEETS, FORCE_LIGHT_STYLESHEET)
        found: dict[str, str | None] = {}

        async def probe(path: str) -> None:
            found[path] = await self.get(path)

        async with anyio.create_task_group() as tg:
            for path in paths:
                tg.start_soon(probe, path)

        stylesheet = next((p for p in PRIMARY_STYLESHEETS if found[p] is not None), None)
        return ResolvedAssets(
            header=found[HEADER_PARTIAL],
            footer=found[FOOTER_PARTIAL],
            stylesheet_href=stylesheet,
            force_light_href=FORCE_LIGHT_STYLESHEET if found[FORCE_LIGHT_STYLESHEET] is not None else None,
        )
