"""The middleware calling convention.

Middleware wraps the rest of the pipeline: it gets the request and a
``next`` callable, and returns whatever response it decides on, usually
a transformed copy of ``await next(request)``. Plain async functions and
objects with an async ``__call__`` both qualify.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from stitch.http.request import Request
from stitch.http.response import Response, StreamingResponse

AnyResponse: TypeAlias = Response | StreamingResponse

# Everything downstream of the current middleware
Next: TypeAlias = Callable[[Request], Awaitable[AnyResponse]]


class Middleware(Protocol):
    """Shape every middleware has.

    ::

        async def no_store(request: Request, next: Next) -> AnyResponse:
            response = await next(request)
            return response.with_header("Cache-Control", "no-store")
    """

    async def __call__(self, request: Request, next: Next) -> AnyResponse: ...
