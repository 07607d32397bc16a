"""Stitch application class.

Mutable during setup (routes, middleware, lifecycle hooks). Compiled
into a frozen runtime state the first time it serves anything.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

from stitch._internal.asgi import Receive, Scope, Send
from stitch._internal.invoke import invoke
from stitch.config import AppConfig
from stitch.middleware.protocol import Middleware
from stitch.routing.route import Route
from stitch.routing.router import Router
from stitch.server.handler import handle_request

Phase: TypeAlias = Literal["startup", "shutdown"]


@dataclass(frozen=True, slots=True)
class _RouteSpec:
    """A route as registered, before the router is compiled."""

    path: str
    handler: Callable[..., Any]
    methods: tuple[str, ...] | None
    name: str | None

    def compile(self) -> Route:
        methods = frozenset(m.upper() for m in (self.methods or ("GET",)))
        return Route(path=self.path, handler=self.handler, methods=methods, name=self.name)


class App:
    """The stitch application.

    ``create_app()`` builds one wired for a static site; build one by
    hand to mount extra routes or middleware::

        app = App(AppConfig(debug=True))
        app.add_middleware(PageShell(resolver))

        @app.route("/healthz")
        def healthz():
            return {"ok": True}

    Thread safety:
        Registration happens single-threaded at import time. The first
        ASGI call (or ``run()``) compiles the app under a lock with a
        double check, so concurrent first requests compile it once.
    """

    __slots__ = (
        "_compile_lock",
        "_frozen",
        "_hooks",
        "_middleware",
        "_pending_middleware",
        "_route_specs",
        "_router",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._route_specs: list[_RouteSpec] = []
        self._pending_middleware: list[Middleware] = []
        self._hooks: dict[Phase, list[Callable[..., Any]]] = {"startup": [], "shutdown": []}
        self._frozen = False
        self._compile_lock = threading.Lock()

        # Runtime state, filled in by _freeze()
        self._router: Router | None = None
        self._middleware: tuple[Middleware, ...] = ()

    # -- Registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a route handler via decorator.

        Args:
            path: URL path. ``{param}`` captures one path segment.
            methods: HTTP methods, ``["GET"]`` by default. GET routes
                answer HEAD too.
            name: Optional route name.
        """

        def register(handler: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            spec = _RouteSpec(path, handler, tuple(methods) if methods else None, name)
            self._route_specs.append(spec)
            return handler

        return register

    def add_middleware(self, middleware: Middleware) -> None:
        """Append *middleware*. The first one added is the outermost."""
        self._check_not_frozen()
        self._pending_middleware.append(middleware)

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a sync or async hook to run before the first request."""
        return self._add_hook("startup", func)

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a sync or async hook to run when the server stops."""
        return self._add_hook("shutdown", func)

    def _add_hook(self, phase: Phase, func: Callable[..., Any]) -> Callable[..., Any]:
        self._check_not_frozen()
        self._hooks[phase].append(func)
        return func

    # -- Serving --

    def run(
        self,
        host: str | None = None,
        port: int | None = None,
        *,
        app_path: str | None = None,
    ) -> None:
        """Compile the app and serve it with pounce.

        Debug mode runs one reloading worker that also watches the site
        directory; otherwise pounce picks the worker count.
        """
        self._ensure_frozen()

        from stitch.server.dev import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
            workers=1 if self.config.debug else 0,
            reload_dirs=(str(self.config.site_dir),),
            app_path=app_path,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        self._ensure_frozen()

        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return

        assert self._router is not None
        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._middleware,
            debug=self.config.debug,
        )

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        """Answer lifespan startup/shutdown messages until shutdown."""
        while True:
            message = await receive()
            match message["type"]:
                case "lifespan.startup":
                    try:
                        await self.startup()
                    except Exception as exc:
                        await send({"type": "lifespan.startup.failed", "message": str(exc)})
                        return
                    await send({"type": "lifespan.startup.complete"})
                case "lifespan.shutdown":
                    await self.shutdown()
                    await send({"type": "lifespan.shutdown.complete"})
                    return

    async def startup(self) -> None:
        """Run startup hooks in registration order."""
        await self._run_hooks("startup")

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        await self._run_hooks("shutdown")

    async def _run_hooks(self, phase: Phase) -> None:
        for hook in self._hooks[phase]:
            await invoke(hook)

    # -- Compilation --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._compile_lock:
            if not self._frozen:
                self._freeze()

    def _freeze(self) -> None:
        """Build the router and middleware chain. Caller holds _compile_lock."""
        router = Router()
        for spec in self._route_specs:
            router.add(spec.compile())
        router.compile()
        self._router = router
        self._middleware = tuple(self._pending_middleware)
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app once it is serving requests; register "
                "routes, middleware and hooks before app.run() or the first request."
            )
            raise RuntimeError(msg)
