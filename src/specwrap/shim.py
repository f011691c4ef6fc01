"""Default collaborators for :class:`TestFrameworkFnWrapper`.

* :func:`execute_hooks_with_args` runs registered hook callbacks.
* :func:`execute_async` is the strategy for coroutine spec functions.
* :func:`run_sync` is the blocking strategy; it runs the spec function
  on a worker thread and settles through ``resolve``/``reject``.

Both strategies retry a failing spec function until its
:class:`RetryState` is exhausted.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import threading
import time
from typing import TYPE_CHECKING, Any

from specwrap.config import get_settings
from specwrap.core.models import HookOutcome, RetryState
from specwrap.patterns.retry import RetryPolicy, retry_async, retry_blocking

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from specwrap.core.dispatcher import Resolver

logger = logging.getLogger(__name__)


def _retry_policy() -> RetryPolicy:
    return RetryPolicy(base_delay_seconds=get_settings().retry_delay_seconds)


async def _run_one_hook(hook_name: str, hook: Callable[..., Any], args: list[Any]) -> HookOutcome:
    try:
        result = hook(*args)
        if inspect.isawaitable(result):
            result = await result
    except Exception as exc:
        logger.debug("Hook %s raised %r", hook_name, exc)
        return HookOutcome(hook_name=hook_name, error=exc)
    return HookOutcome(hook_name=hook_name, result=result)


async def execute_hooks_with_args(
    hook_name: str,
    hooks: Callable[..., Any] | Sequence[Callable[..., Any]] | None = None,
    args: Any = None,
) -> list[HookOutcome]:
    """Run every callback in *hooks* with *args* and collect the outcomes.

    A single callable is treated as a one-element list and a non-list
    *args* as a single argument.  Failing callbacks are reported as failed
    outcomes; this function itself never raises for a hook error.
    """
    if hooks is None:
        hooks = []
    elif callable(hooks):
        hooks = [hooks]
    if args is None:
        args = []
    elif not isinstance(args, list):
        args = [args]

    start = time.monotonic()
    outcomes = await asyncio.gather(*(_run_one_hook(hook_name, hook, args) for hook in hooks))
    if outcomes:
        logger.debug(
            'Finished to run "%s" hook in %dms',
            hook_name,
            (time.monotonic() - start) * 1000,
        )
    return list(outcomes)


async def execute_async(
    fn: Callable[..., Any],
    retries: RetryState,
    args: Sequence[Any] = (),
) -> Any:
    """Await *fn* with *args*, retrying while *retries* allows it."""
    return await retry_async(fn, retries, list(args), _retry_policy())


async def _settle(awaitable: Any) -> Any:
    return await awaitable


def run_sync(
    fn: Callable[..., Any],
    retries: RetryState,
    args: Sequence[Any] = (),
) -> Resolver:
    """Return a resolver that runs *fn* on a worker thread.

    An awaitable returned by *fn* is awaited on the event loop the
    resolver was called from, or on a fresh loop when there is none.
    """
    policy = _retry_policy()
    call_args = list(args)

    def resolver(resolve: Callable[[Any], None], reject: Callable[[Any], None]) -> None:
        try:
            loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        @functools.wraps(fn)
        def _call(*inner_args: Any) -> Any:
            result = fn(*inner_args)
            if not inspect.isawaitable(result):
                return result
            if loop is None:
                return asyncio.run(_settle(result))
            return asyncio.run_coroutine_threadsafe(_settle(result), loop).result()

        def _target() -> None:
            try:
                result = retry_blocking(_call, retries, call_args, policy)
            except BaseException as exc:
                # pytest.fail/skip and SystemExit must still settle the future
                reject(exc)
            else:
                resolve(result)

        name = getattr(fn, "__name__", "spec")
        threading.Thread(target=_target, name=f"specwrap-{name}", daemon=True).start()

    return resolver
