"""Removal of specwrap and event-loop frames from error stack traces.

Python exceptions do not carry a textual stack, so the filtered trace is
stored on the exception as a ``stack`` attribute.  The exception object
itself is never replaced.
"""

from __future__ import annotations

import contextlib
import traceback
from typing import Any

STACKTRACE_FILTER: frozenset[str] = frozenset(
    {
        "/specwrap/core/",
        "/specwrap/shim.py",
        "/specwrap/patterns/",
        "/asyncio/",
        "/concurrent/futures/",
        "/threading.py",
    }
)

# source and caret lines under a ``  File "..."`` frame header
_SOURCE_INDENT = "    "


def _is_internal(line: str) -> bool:
    return any(marker in line for marker in STACKTRACE_FILTER)


def filter_stack_trace(stack: str) -> str:
    """Drop every frame of *stack* that points into an internal module.

    A Python frame is a ``File "..."`` header followed by more deeply
    indented source and caret lines; the whole frame goes when its header
    matches.  Any other matching line is dropped on its own.
    """
    if not isinstance(stack, str):
        return stack

    kept: list[str] = []
    in_dropped_frame = False
    for line in stack.split("\n"):
        if in_dropped_frame and line.startswith(_SOURCE_INDENT):
            continue
        in_dropped_frame = False
        if _is_internal(line):
            in_dropped_frame = line.lstrip().startswith('File "')
            continue
        kept.append(line)
    return "\n".join(kept)


def format_error_stack(error: BaseException) -> str:
    """Render the traceback of *error* as text."""
    return "".join(traceback.format_exception(type(error), error, error.__traceback__)).rstrip(
        "\n"
    )


def apply_stack_filter(error: Any) -> Any:
    """Filter the stack of *error* in place and return the same object.

    Exceptions without a ``stack`` attribute get one rendered from their
    traceback.  Objects that cannot take attributes are left untouched.
    """
    stack = getattr(error, "stack", None)
    if stack is None and isinstance(error, BaseException):
        stack = format_error_stack(error)
    if isinstance(stack, str):
        # frozen records and builtin instances reject new attributes
        with contextlib.suppress(AttributeError):
            error.stack = filter_stack_trace(stack)
    elif isinstance(error, dict) and isinstance(error.get("stack"), str):
        error["stack"] = filter_stack_trace(error["stack"])
    return error
