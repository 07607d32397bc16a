"""Stitch — a serve-time HTML shell for static sites.

Sits in front of a directory of static pages and rewrites every HTML
response in one streaming pass: shared header/footer partials,
stylesheet links, freshness stamps, JSON-LD ``dateModified``, and
cache validators. Everything that isn't HTML passes through untouched.

Basic usage::

    from stitch import AppConfig, create_app

    app = create_app(AppConfig(site_dir="public"))
    app.run()

Or from the command line::

    stitch serve public --port 8000
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "AssetUnavailable",
    "ConfigurationError",
    "HTTPError",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "PageShell",
    "Redirect",
    "Request",
    "Response",
    "StaticFiles",
    "StitchError",
    "StreamingResponse",
    "create_app",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import stitch`` fast while providing a clean top-level API.
    """
    if name == "App":
        from stitch.app import App

        return App

    if name == "AppConfig":
        from stitch.config import AppConfig

        return AppConfig

    if name == "create_app":
        from stitch.site import create_app

        return create_app

    if name == "Request":
        from stitch.http.request import Request

        return Request

    if name in ("Response", "StreamingResponse", "Redirect"):
        from stitch.http import response as _resp

        return getattr(_resp, name)

    if name in ("Middleware", "Next", "PageShell", "StaticFiles"):
        import stitch.middleware as _mw

        return getattr(_mw, name)

    if name in (
        "AssetUnavailable",
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "StitchError",
    ):
        from stitch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
