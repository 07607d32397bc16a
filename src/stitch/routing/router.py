"""Compiled router.

Static paths resolve through a dict lookup; paths with ``{param}``
segments are checked in registration order afterwards.
"""

from dataclasses import dataclass, field

from stitch.errors import MethodNotAllowed, NotFound
from stitch.routing.route import Route, RouteMatch


def split_path(path: str) -> tuple[str, ...]:
    """Split a URL or route path into its non-empty segments.

    ``"/"`` and ``""`` both yield ``()``; a trailing slash is ignored.
    """
    return tuple(part for part in path.strip("/").split("/") if part)


def _is_param(segment: str) -> bool:
    return segment.startswith("{") and segment.endswith("}")


@dataclass(slots=True)
class _Pattern:
    """A parameterized route path and the routes registered on it."""

    segments: tuple[str, ...]
    routes_by_method: dict[str, Route] = field(default_factory=dict)

    def match(self, parts: tuple[str, ...]) -> dict[str, str] | None:
        if len(parts) != len(self.segments):
            return None
        params: dict[str, str] = {}
        for segment, part in zip(self.segments, parts, strict=True):
            if _is_param(segment):
                params[segment[1:-1]] = part
            elif segment != part:
                return None
        return params


class Router:
    """Route table, frozen by ``compile()``.

    Usage::

        router = Router()
        router.add(Route("/health", handler, frozenset({"GET"})))
        router.add(Route("/pages/{slug}", handler, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/pages/financing")
    """

    __slots__ = ("_compiled", "_patterns", "_static")

    def __init__(self) -> None:
        self._static: dict[tuple[str, ...], dict[str, Route]] = {}
        self._patterns: list[_Pattern] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        segments = split_path(route.path)
        if any(_is_param(segment) for segment in segments):
            pattern = next((p for p in self._patterns if p.segments == segments), None)
            if pattern is None:
                pattern = _Pattern(segments)
                self._patterns.append(pattern)
            target = pattern.routes_by_method
        else:
            target = self._static.setdefault(segments, {})

        for method in route.methods:
            target[method] = route
            # HEAD is served by the GET handler unless registered explicitly
            if method == "GET":
                target.setdefault("HEAD", route)

    @property
    def routes(self) -> list[Route]:
        """Every registered route, each listed once."""
        seen: set[int] = set()
        result: list[Route] = []
        tables = [*self._static.values(), *(p.routes_by_method for p in self._patterns)]
        for table in tables:
            for route in table.values():
                if id(route) not in seen:
                    seen.add(id(route))
                    result.append(route)
        return result

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against the routes.

        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = split_path(path)
        candidates: list[tuple[dict[str, Route], dict[str, str]]] = []

        static = self._static.get(parts)
        if static is not None:
            candidates.append((static, {}))
        for pattern in self._patterns:
            params = pattern.match(parts)
            if params is not None:
                candidates.append((pattern.routes_by_method, params))

        for table, params in candidates:
            if method in table:
                return RouteMatch(route=table[method], path_params=params)

        if candidates:
            allowed = frozenset(m for table, _ in candidates for m in table)
            raise MethodNotAllowed(allowed)

        raise NotFound(f"No route matches {method} {path!r}")
