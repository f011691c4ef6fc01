"""Small helpers shared by the wrapper and its default collaborators."""

from __future__ import annotations

import functools
import inspect
from typing import Any


def is_function_async(fn: Any) -> bool:
    """Return ``True`` when calling *fn* produces an awaitable.

    Recognises coroutine functions, partials wrapping them, and objects
    whose ``__call__`` is a coroutine function.
    """
    while isinstance(fn, functools.partial):
        fn = fn.func
    if inspect.iscoroutinefunction(fn):
        return True
    call = getattr(fn, "__call__", None)  # noqa: B004
    return call is not None and not inspect.isfunction(fn) and inspect.iscoroutinefunction(call)
