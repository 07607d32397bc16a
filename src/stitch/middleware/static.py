"""Static site origin middleware.

Serves a built site directory the way static hosts do, including
extension-less ("pretty") URLs: ``/costs`` serves ``costs.html`` and
``/blog/`` serves ``blog/index.html``. An optional custom 404 page is
served when nothing else answers.
"""

import mimetypes
from dataclasses import dataclass
from pathlib import Path

import anyio

from stitch.errors import HTTPError
from stitch.http.request import Request
from stitch.http.response import Response
from stitch.middleware.protocol import AnyResponse, Next

_FORBIDDEN = Response(body="Forbidden", status=403, content_type="text/plain; charset=utf-8")


@dataclass(frozen=True, slots=True)
class _Lookup:
    """Outcome of mapping a URL path onto the site directory."""

    file: Path | None = None
    redirect_to: str | None = None
    forbidden: bool = False


class StaticFiles:
    """Middleware that serves a static site directory.

    For a request path ``/p`` (relative to ``prefix``):

    1. ``p`` is a file: serve it
    2. ``p`` is a directory with an index: redirect ``/p`` to ``/p/``,
       serve the index for ``/p/``
    3. ``p.html`` is a file and the path has no trailing slash: serve it
    4. otherwise fall through to the next handler; if that raises a 404
       and ``not_found_page`` exists, serve it with status 404

    Only GET and HEAD are served. Symlinks are resolved and anything that
    lands outside the directory is refused with 403.

    Usage::

        app.add_middleware(StaticFiles("public", not_found_page="404.html"))
    """

    __slots__ = ("_cache_control", "_index", "_not_found_page", "_prefix", "_root")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/",
        *,
        index: str = "index.html",
        not_found_page: str | None = None,
        cache_control: str = "no-cache",
    ) -> None:
        self._root = Path(directory).resolve()
        self._index = index
        self._not_found_page = not_found_page
        self._cache_control = cache_control
        # "/", "" and "/site/" normalize to "", "" and "/site".
        self._prefix = "/" + prefix.strip("/") if prefix.strip("/") else ""

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        relative = self._relative(request.path)
        if relative is None:
            return await next(request)

        lookup = self._lookup(request.path, relative)
        if lookup.forbidden:
            return _FORBIDDEN
        if lookup.redirect_to is not None:
            return Response(body="", status=301, content_type=None).with_header(
                "Location", lookup.redirect_to
            )
        if lookup.file is not None:
            return await self._serve(lookup.file)
        return await self._fall_through(request, next)

    # -- Resolution --

    def _relative(self, path: str) -> str | None:
        """*path* relative to the prefix, or ``None`` if outside it."""
        if not self._prefix:
            return path.lstrip("/")
        if path == self._prefix or path.startswith(self._prefix + "/"):
            return path[len(self._prefix) :].lstrip("/")
        return None

    def _contains(self, candidate: Path) -> bool:
        return candidate.is_relative_to(self._root)

    def _lookup(self, path: str, relative: str) -> _Lookup:
        target = (self._root / relative).resolve() if relative else self._root
        if not self._contains(target):
            return _Lookup(forbidden=True)

        if target.is_dir():
            index = target / self._index
            if not index.is_file():
                return _Lookup()
            if relative and not path.endswith("/"):
                return _Lookup(redirect_to=path + "/")
            return _Lookup(file=index)

        if target.is_file():
            return _Lookup(file=target)

        # /costs -> costs.html, but /costs/ never does
        if relative and not path.endswith("/"):
            pretty = target.with_name(target.name + ".html")
            if self._contains(pretty) and pretty.is_file():
                return _Lookup(file=pretty)

        return _Lookup()

    # -- Responses --

    async def _serve(self, file: Path, *, status: int = 200) -> Response:
        guessed, _ = mimetypes.guess_type(file.name)
        if guessed is None:
            content_type = "application/octet-stream"
        elif guessed.startswith("text/"):
            content_type = f"{guessed}; charset=utf-8"
        else:
            content_type = guessed

        body = await anyio.Path(file).read_bytes()
        return Response(body=body, status=status, content_type=content_type).with_header(
            "Cache-Control", self._cache_control
        )

    async def _fall_through(self, request: Request, next: Next) -> AnyResponse:
        """Let routes answer; turn their 404 into the custom page if there is one."""
        page = self._not_found_file()
        if page is None:
            return await next(request)
        try:
            return await next(request)
        except HTTPError as exc:
            if exc.status != 404:
                raise
            return await self._serve(page, status=404)

    def _not_found_file(self) -> Path | None:
        if not self._not_found_page:
            return None
        page = (self._root / self._not_found_page).resolve()
        return page if self._contains(page) and page.is_file() else None
