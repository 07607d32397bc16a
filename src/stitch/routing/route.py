"""Registered routes and the result of matching one."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Route:
    """A handler bound to a path pattern and a set of methods.

    ``path`` is matched segment by segment; a ``{name}`` segment captures
    whatever single segment sits in that position.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    route: Route
    path_params: dict[str, str]
