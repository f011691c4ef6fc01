"""Unit tests for the default hook invoker and execution strategies."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from specwrap.core.models import HookOutcome, RetryState
from specwrap.shim import execute_async, execute_hooks_with_args, run_sync


class TestExecuteHooksWithArgs:
    @pytest.mark.asyncio
    async def test_no_hooks(self) -> None:
        assert await execute_hooks_with_args("beforeTest") == []
        assert await execute_hooks_with_args("beforeTest", []) == []

    @pytest.mark.asyncio
    async def test_single_callable(self) -> None:
        outcomes = await execute_hooks_with_args("beforeTest", lambda a, b: a * b, [3, 4])
        assert outcomes == [HookOutcome(hook_name="beforeTest", result=12)]

    @pytest.mark.asyncio
    async def test_non_list_args_become_single_argument(self) -> None:
        outcomes = await execute_hooks_with_args("beforeTest", lambda x: x, "title")
        assert outcomes[0].result == "title"

    @pytest.mark.asyncio
    async def test_mixed_sync_async_and_failing(self) -> None:
        async def _async_hook(x: int) -> int:
            await asyncio.sleep(0)
            return x + 1

        def _failing_hook(x: int) -> None:
            raise ValueError("hook failed")

        outcomes = await execute_hooks_with_args(
            "afterTest", [_async_hook, _failing_hook, str], [1]
        )

        assert [o.result for o in outcomes] == [2, None, "1"]
        assert [o.failed for o in outcomes] == [False, True, False]
        assert isinstance(outcomes[1].error, ValueError)

    @pytest.mark.asyncio
    async def test_async_hooks_run_concurrently(self) -> None:
        order: list[str] = []

        def _make(name: str, delay: float) -> Any:
            async def _hook() -> None:
                await asyncio.sleep(delay)
                order.append(name)

            return _hook

        await execute_hooks_with_args("beforeTest", [_make("slow", 0.05), _make("fast", 0)])
        assert order == ["fast", "slow"]


class TestExecuteAsync:
    @pytest.mark.asyncio
    async def test_awaits_coroutine(self) -> None:
        async def _spec(x: int) -> int:
            return x * 10

        assert await execute_async(_spec, RetryState(), [4]) == 40

    @pytest.mark.asyncio
    async def test_counts_retries(self) -> None:
        retries = RetryState(limit=2)

        async def _spec() -> None:
            raise RuntimeError("always")

        with pytest.raises(RuntimeError, match="always"):
            await execute_async(_spec, retries, [])
        assert retries.attempts == 2

    @pytest.mark.asyncio
    async def test_retry_delay_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPECWRAP_RETRY_DELAY", "0.05")
        calls: list[float] = []
        loop = asyncio.get_running_loop()

        async def _spec() -> str:
            calls.append(loop.time())
            if len(calls) == 1:
                raise RuntimeError("once")
            return "ok"

        assert await execute_async(_spec, RetryState(limit=1), []) == "ok"
        assert calls[1] - calls[0] >= 0.04


class TestRunSync:
    @pytest.mark.asyncio
    async def test_resolver_settles_result(self) -> None:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()

        def _resolve(value: Any) -> None:
            loop.call_soon_threadsafe(future.set_result, value)

        def _reject(error: Any) -> None:
            loop.call_soon_threadsafe(future.set_exception, error)

        resolver = run_sync(lambda a: a.upper(), RetryState(), ["ok"])
        resolver(_resolve, _reject)
        assert await future == "OK"

    @pytest.mark.asyncio
    async def test_resolver_rejects_after_retries(self) -> None:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()
        retries = RetryState(limit=1)

        def _fail() -> None:
            raise LookupError("gone")

        def _resolve(value: Any) -> None:
            loop.call_soon_threadsafe(future.set_result, value)

        def _reject(error: Any) -> None:
            loop.call_soon_threadsafe(future.set_exception, error)

        run_sync(_fail, retries, [])(_resolve, _reject)
        with pytest.raises(LookupError):
            await future
        assert retries.attempts == 1

    @pytest.mark.asyncio
    async def test_resolver_awaits_returned_coroutine(self) -> None:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()

        async def _body() -> int:
            await asyncio.sleep(0)
            return 42

        def _resolve(value: Any) -> None:
            loop.call_soon_threadsafe(future.set_result, value)

        def _reject(error: Any) -> None:
            loop.call_soon_threadsafe(future.set_exception, error)

        run_sync(lambda: _body(), RetryState(), [])(_resolve, _reject)
        assert await future == 42

    @pytest.mark.asyncio
    async def test_resolver_rejects_outcome_exceptions(self) -> None:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()
        retries = RetryState(limit=2)

        def _fail() -> None:
            pytest.fail("explicit")

        def _resolve(value: Any) -> None:
            loop.call_soon_threadsafe(future.set_result, value)

        def _reject(error: Any) -> None:
            loop.call_soon_threadsafe(future.set_exception, error)

        run_sync(_fail, retries, [])(_resolve, _reject)
        with pytest.raises(pytest.fail.Exception, match="explicit"):
            await asyncio.wait_for(future, timeout=2)
        assert retries.attempts == 0
