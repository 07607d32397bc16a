"""Route derivation — request path to normalized path and slug.

Pure functions, no I/O.
"""

import re
from dataclasses import dataclass

_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")


@dataclass(frozen=True, slots=True)
class RouteContext:
    """Where the request landed.

    ``normalized_path`` is the request path with exactly one trailing
    slash removed (``"/"`` becomes ``""``). ``slug`` is safe both as a
    single CSS class token and as an HTML attribute value.
    """

    normalized_path: str
    slug: str


def normalize_path(path: str) -> str:
    """Strip exactly one trailing slash: ``/blog/`` -> ``/blog``, ``/`` -> ``""``."""
    return path[:-1] if path.endswith("/") else path


def derive_route(path: str) -> RouteContext:
    """Derive the route context for a request path.

    >>> derive_route("/financing")
    RouteContext(normalized_path='/financing', slug='financing')
    >>> derive_route("/blog/my-post!").slug
    'blog-my-post-'
    >>> derive_route("/").slug
    'home'
    """
    normalized = normalize_path(path)
    if path == "/":
        return RouteContext(normalized_path=normalized, slug="home")
    slug = _UNSAFE.sub("-", normalized.removeprefix("/"))
    return RouteContext(normalized_path=normalized, slug=slug or "home")
