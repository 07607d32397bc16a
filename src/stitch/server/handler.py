"""Per-request ASGI entry point.

Turns the scope into a ``Request``, runs it through the middleware chain
down to the router, converts errors into responses, and writes whatever
comes back to ``send``. Nothing past this module sees raw ASGI.
"""

import inspect
from collections.abc import Callable
from typing import Any

from stitch._internal.asgi import Receive, Scope, Send
from stitch._internal.invoke import invoke
from stitch.errors import HTTPError
from stitch.http.request import Request
from stitch.http.response import StreamingResponse
from stitch.middleware.protocol import AnyResponse, Next
from stitch.routing.router import Router
from stitch.server.errors import handle_http_error, handle_internal_error
from stitch.server.negotiation import negotiate
from stitch.server.sender import send_response, send_streaming_response


def build_chain(router: Router, middleware: tuple[Callable[..., Any], ...]) -> Next:
    """Compose *middleware* around router dispatch, first entry outermost."""

    async def dispatch(request: Request) -> AnyResponse:
        match = router.match(request.method, request.path)
        handler = match.route.handler
        result = await invoke(handler, **_handler_kwargs(handler, request, match.path_params))
        return negotiate(result)

    chain: Next = dispatch
    for mw in reversed(middleware):
        chain = _link(mw, chain)
    return chain


def _link(mw: Callable[..., Any], downstream: Next) -> Next:
    async def call(request: Request) -> AnyResponse:
        return await mw(request, downstream)

    return call


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    debug: bool,
) -> None:
    """Serve one HTTP request."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    try:
        response = await build_chain(router, middleware)(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request, debug)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug)

    if isinstance(response, StreamingResponse):
        await send_streaming_response(response, send)
    else:
        await send_response(response, send)


def _handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
    path_params: dict[str, str],
) -> dict[str, Any]:
    """Match handler parameters to the request and path parameters.

    A parameter named ``request`` or annotated ``Request`` gets the
    request; one named after a path parameter gets that segment.
    """
    kwargs: dict[str, Any] = {}
    for name, param in inspect.signature(handler, eval_str=True).parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request.with_path_params(path_params)
        elif name in path_params:
            kwargs[name] = path_params[name]
    return kwargs
