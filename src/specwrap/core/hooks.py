"""Before/after hook invocation around a wrapped spec function.

Hooks are run through an injected ``execute_hooks_with_args`` callable
which returns one outcome per registered callback.  The outcomes are
handed to an injected ``log_hook_error`` callable together with the
correlation id of the run.  Hook failures never reach the wrapped test.

Usage::

    runner = HookRunner(execute_hooks_with_args, log_hook_error)
    await runner.run_hook("before", "Test", before_spec, args, cid="0-0")
"""

from __future__ import annotations

import inspect
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from specwrap.core.models import HookOutcome, HookSpec

HookInvoker = Callable[[str, Any, list[Any]], Awaitable[Sequence[Any]]]
HookErrorLogger = Callable[[str, Sequence[Any], str], Any]


def hook_names(kind: str, type_: str) -> tuple[str, str]:
    """Return ``(hook_name, log_label)``, e.g. ``("beforeTest", "BeforeTest")``."""
    kind = kind.lower()
    return f"{kind}{type_}", f"{kind.capitalize()}{type_}"


def now_ms() -> float:
    """Monotonic clock in milliseconds, used to time spec execution."""
    return time.monotonic() * 1000


class HookRunner:
    """Invokes hook callbacks and reports their failures."""

    def __init__(
        self,
        execute_hooks_with_args: HookInvoker,
        log_hook_error: HookErrorLogger,
    ) -> None:
        self._execute = execute_hooks_with_args
        self._log = log_hook_error

    async def run_hook(
        self,
        kind: str,
        type_: str,
        hook_spec: HookSpec,
        args: list[Any],
        cid: str,
    ) -> list[Any]:
        """Run the hook of *kind* (``before``/``after``) and log failures.

        Returns the per-hook outcomes.  An exception raised by the hook
        invoker itself is recorded as a single failed outcome.
        """
        hook_name, label = hook_names(kind, type_)
        try:
            outcomes = list(await self._execute(hook_name, hook_spec.hook_fn, args))
        except Exception as exc:
            outcomes = [HookOutcome(hook_name=hook_name, error=exc)]

        logged = self._log(label, outcomes, cid)
        if inspect.isawaitable(logged):
            await logged
        return outcomes
