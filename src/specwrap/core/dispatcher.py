"""Selection of the execution strategy for a spec function.

Two strategies are injected:

* ``run_async(spec_fn, retries, args)`` returns an awaitable (or a plain
  value) and is used for coroutine functions.
* ``run_sync(spec_fn, retries, args)`` returns a *resolver*, a callable
  taking ``(resolve, reject)``.  The resolver may block, possibly on
  another thread, and settles the outcome through those two callbacks.

Whichever strategy runs, the caller gets one awaitable that yields the
spec result or raises the spec error unchanged.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from specwrap.core.models import RetryState
from specwrap.errors import AssertionFailure
from specwrap.utils import is_function_async

Resolver = Callable[[Callable[[Any], None], Callable[[Any], None]], None]
AsyncStrategy = Callable[[Callable[..., Any], RetryState, Sequence[Any]], Awaitable[Any]]
BlockingStrategy = Callable[[Callable[..., Any], RetryState, Sequence[Any]], Resolver]


class _Settlement:
    """First-wins bridge from resolver callbacks to an asyncio future.

    The callbacks may be invoked from any thread.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._lock = threading.Lock()
        self._settled = False
        self.future: asyncio.Future[Any] = loop.create_future()

    def _claim(self) -> bool:
        with self._lock:
            if self._settled:
                return False
            self._settled = True
            return True

    def resolve(self, value: Any = None) -> None:
        if self._claim():
            self._loop.call_soon_threadsafe(self._set_result, value)

    def reject(self, error: Any) -> None:
        if not isinstance(error, BaseException):
            error = AssertionFailure(error)
        if self._claim():
            self._loop.call_soon_threadsafe(self._set_exception, error)

    def _set_result(self, value: Any) -> None:
        if not self.future.done():
            self.future.set_result(value)

    def _set_exception(self, error: BaseException) -> None:
        if not self.future.done():
            self.future.set_exception(error)


class ExecutionDispatcher:
    """Runs a spec function through the async or the blocking strategy.

    The async strategy is chosen when *is_async* classifies the function
    as asynchronous or when no blocking strategy was supplied.  Retry
    counting is left entirely to the strategy.
    """

    def __init__(
        self,
        run_async: AsyncStrategy,
        run_sync: BlockingStrategy | None = None,
        is_async: Callable[[Any], bool] = is_function_async,
    ) -> None:
        self._run_async = run_async
        self._run_sync = run_sync
        self._is_async = is_async

    async def dispatch(
        self,
        spec_fn: Callable[..., Any],
        retries: RetryState,
        args: Sequence[Any],
    ) -> Any:
        """Run *spec_fn* with *args* and return its settled result."""
        run_sync = self._run_sync
        if run_sync is None or self._is_async(spec_fn):
            outcome = self._run_async(spec_fn, retries, args)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            return outcome

        settlement = _Settlement(asyncio.get_running_loop())
        try:
            resolver = run_sync(spec_fn, retries, args)
            resolver(settlement.resolve, settlement.reject)
        except Exception as exc:
            settlement.reject(exc)
        return await settlement.future
