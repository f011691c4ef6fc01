"""Wraps a test framework spec or hook function with before/after hooks.

This is the central orchestrator.  For every call it:

1. Creates a fresh :class:`RetryState` from the repeat limit.
2. Runs the before-hook (failures are logged, never raised).
3. Dispatches the spec function through the async or blocking strategy
   and captures its result or error.
4. Measures the duration of the spec function alone.
5. Promotes a recorded assertion failure when nothing was raised.
6. Appends a :class:`ReconciledResult` to the after-hook arguments.
7. Runs the after-hook.
8. Raises the error unless a matcher already reported it, otherwise
   returns the spec result.

Usage::

    wrapper = TestFrameworkFnWrapper(execute_hooks_with_args, execute_async, run_sync)
    result = await wrapper.wrap(
        context,
        "Test",
        SpecInvocation(test_body, []),
        HookSpec(before_hooks, lambda ctx: [ctx.title]),
        HookSpec(after_hooks, lambda ctx: [ctx.title]),
        cid="0-0",
        repeat_limit=2,
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from specwrap.core import reconciler
from specwrap.core.dispatcher import ExecutionDispatcher
from specwrap.core.hooks import HookRunner, now_ms
from specwrap.core.models import (
    ExecutionOutcome,
    HookSpec,
    ReconciledResult,
    RetryState,
    SpecInvocation,
)
from specwrap.core.stacktrace import apply_stack_filter
from specwrap.error_handler import log_hook_error
from specwrap.errors import unwrap_failure
from specwrap.shim import execute_async, execute_hooks_with_args, run_sync
from specwrap.utils import is_function_async

if TYPE_CHECKING:
    from collections.abc import Callable

    from specwrap.core.dispatcher import AsyncStrategy, BlockingStrategy
    from specwrap.core.hooks import HookErrorLogger, HookInvoker


class TestFrameworkFnWrapper:
    """Runs one spec function between its before and after hooks.

    All collaborators are injected so framework adapters can swap the
    execution strategies or the hook invoker.  The wrapper holds no state
    between calls and may serve concurrent calls.
    """

    __test__ = False

    def __init__(
        self,
        execute_hooks_with_args: HookInvoker,
        execute_async: AsyncStrategy,
        run_sync: BlockingStrategy | None = None,
        is_async: Callable[[Any], bool] = is_function_async,
        log_hook_error: HookErrorLogger = log_hook_error,
    ) -> None:
        self._hooks = HookRunner(execute_hooks_with_args, log_hook_error)
        self._dispatcher = ExecutionDispatcher(execute_async, run_sync, is_async)

    async def wrap(
        self,
        context: Any,
        type_: str,
        spec: SpecInvocation,
        before: HookSpec,
        after: HookSpec,
        cid: str,
        repeat_limit: int = 0,
    ) -> Any:
        """Run *spec* for *context* and return its result or raise its error.

        Args:
            context: Per-invocation context handed to the argument producers.
            type_: Label such as ``"Test"``, ``"Step"`` or ``"Hook"``.
            spec: The function to run and its argument list.
            before: Before-hook callbacks and argument producer.
            after: After-hook callbacks and argument producer.
            cid: Correlation id used when logging hook failures.
            repeat_limit: Number of retries the strategy may perform.
        """
        retries = RetryState(attempts=0, limit=repeat_limit)

        before_args = before.args_fn(context)
        await self._hooks.run_hook("before", type_, before, before_args, cid)

        outcome = ExecutionOutcome()
        start = now_ms()
        try:
            outcome.result = await self._dispatcher.dispatch(spec.spec_fn, retries, spec.spec_fn_args)
        except Exception as exc:
            outcome.error = apply_stack_filter(unwrap_failure(exc))
        outcome.duration = max(int(now_ms() - start), 0)

        after_args = list(after.args_fn(context))
        outcome.error = reconciler.reconcile(outcome.error, after_args)

        payload = ReconciledResult.from_outcome(outcome, retries)
        after_args.append(payload)
        await self._hooks.run_hook("after", type_, after, list(after_args), cid)

        return reconciler.resolve(outcome.error, outcome.result)


_default_wrapper = TestFrameworkFnWrapper(execute_hooks_with_args, execute_async, run_sync)


async def test_fn_wrapper(
    context: Any,
    type_: str,
    spec: SpecInvocation,
    before: HookSpec,
    after: HookSpec,
    cid: str,
    repeat_limit: int = 0,
) -> Any:
    """Wrap *spec* using the default hook invoker and execution strategies."""
    return await _default_wrapper.wrap(context, type_, spec, before, after, cid, repeat_limit)


test_fn_wrapper.__test__ = False  # type: ignore[attr-defined]
