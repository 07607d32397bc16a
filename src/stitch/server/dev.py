"""Server runner.

Starts a pounce ASGI server with the live stitch App object: a single
reloading worker in debug mode, the configured worker count otherwise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stitch.app import App


def run_server(
    app: App,
    host: str,
    port: int,
    *,
    reload: bool = False,
    workers: int = 1,
    reload_dirs: tuple[str, ...] = (),
    app_path: str | None = None,
) -> None:
    """Serve *app* with pounce until interrupted.

    ``pounce.Server`` is used directly because it accepts a live ASGI
    callable. With ``reload`` the server runs one worker and restarts on
    changes to source files and to the ``.html``/``.css`` files under
    *reload_dirs*; *app_path* (``"module:attribute"``) lets it re-import
    the app after a restart. ``workers=0`` lets pounce choose.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1 if reload else workers,
        reload=reload,
        reload_include=(".html", ".css"),
        reload_dirs=reload_dirs,
    )
    server = Server(config, app, app_path=app_path)
    server.run()
