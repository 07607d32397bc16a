"""Invoke helpers — call sync or async callables uniformly.

Route handlers and lifecycle hooks can be ``def`` or ``async def``.
This module keeps the sync/async check in exactly one place::

    result = await invoke(handler, *args, **kwargs)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await the result if it is awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
