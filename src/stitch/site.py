"""Site assembly — a ready-to-serve App for one static site.

``create_app()`` wires the origin (``StaticFiles`` over ``site_dir``),
the content store for partials and stylesheets, and the ``PageShell``
middleware that rewrites every HTML page::

    from stitch import AppConfig, create_app

    app = create_app(AppConfig(site_dir="public"))
    app.run()
"""

import logging

import httpx

from stitch.app import App
from stitch.config import AppConfig
from stitch.middleware.shell import PageShell
from stitch.middleware.static import StaticFiles
from stitch.shell.assets import AssetResolver, AssetStore, DirectoryAssetStore, HTTPAssetStore
from stitch.shell.finalize import FinalizeOptions

logger = logging.getLogger("stitch.server")


def create_store(config: AppConfig) -> AssetStore:
    """The content store described by *config*.

    An HTTP asset origin wins over a directory; with neither, partials
    and stylesheets are read straight from the site directory (never
    through the site's own routes).
    """
    if config.assets_url is not None:
        client = httpx.AsyncClient(timeout=config.assets_timeout)
        return HTTPAssetStore(config.assets_url, client=client)
    directory = config.assets_dir if config.assets_dir is not None else config.site_dir
    return DirectoryAssetStore(directory)


def create_app(config: AppConfig | None = None, *, store: AssetStore | None = None) -> App:
    """Build the site app. Raises ``ConfigurationError`` for unusable config."""
    config = config or AppConfig()
    config.validate()

    store = store if store is not None else create_store(config)
    app = App(config)

    app.add_middleware(
        PageShell(
            AssetResolver(store),
            finalize_options=FinalizeOptions(
                debug_marker=config.debug_marker,
                build_time=config.build_time,
            ),
        )
    )
    app.add_middleware(
        StaticFiles(
            config.site_dir,
            prefix="/",
            index=config.index,
            not_found_page=config.not_found_page,
            cache_control=config.static_cache_control,
        )
    )

    if isinstance(store, HTTPAssetStore):
        app.on_shutdown(store.aclose)

    logger.debug(
        "site app ready: site_dir=%s store=%s", config.site_dir, type(store).__name__
    )
    return app
