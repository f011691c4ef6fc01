"""Tests for before/after hook invocation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from specwrap.core.hooks import HookRunner, hook_names
from specwrap.core.models import HookOutcome, HookSpec
from specwrap.shim import execute_hooks_with_args

if TYPE_CHECKING:
    from conftest import RecordingHookLog


class TestHookNames:
    def test_before(self) -> None:
        assert hook_names("before", "Test") == ("beforeTest", "BeforeTest")

    def test_after(self) -> None:
        assert hook_names("after", "Hook") == ("afterHook", "AfterHook")


class TestHookRunner:
    """Verify hook invocation, failure logging, and isolation."""

    @pytest.mark.asyncio
    async def test_passes_name_callbacks_and_args(self, hook_log: RecordingHookLog) -> None:
        seen: list[tuple[str, Any, list[Any]]] = []

        async def _invoker(name: str, hook_fn: Any, args: list[Any]) -> list[Any]:
            seen.append((name, hook_fn, args))
            return [None]

        def _hook(*args: Any) -> None:
            pass

        runner = HookRunner(_invoker, hook_log)
        outcomes = await runner.run_hook("before", "Test", HookSpec(_hook), ["title"], "0-1")

        assert seen == [("beforeTest", _hook, ["title"])]
        assert outcomes == [None]
        assert hook_log.calls == [("BeforeTest", [None], "0-1")]

    @pytest.mark.asyncio
    async def test_failing_hook_is_logged_not_raised(self, hook_log: RecordingHookLog) -> None:
        def _explode(*args: Any) -> None:
            raise RuntimeError("hook boom")

        runner = HookRunner(execute_hooks_with_args, hook_log)
        outcomes = await runner.run_hook("after", "Test", HookSpec(_explode), [], "0-2")

        assert len(outcomes) == 1
        assert isinstance(outcomes[0].error, RuntimeError)
        assert hook_log.failures == [("AfterTest", "0-2")]

    @pytest.mark.asyncio
    async def test_invoker_failure_is_recorded(self, hook_log: RecordingHookLog) -> None:
        async def _broken_invoker(name: str, hook_fn: Any, args: list[Any]) -> list[Any]:
            raise ConnectionError("invoker down")

        runner = HookRunner(_broken_invoker, hook_log)
        outcomes = await runner.run_hook("before", "Hook", HookSpec(None), [], "0-3")

        assert len(outcomes) == 1
        assert isinstance(outcomes[0], HookOutcome)
        assert outcomes[0].hook_name == "beforeHook"
        assert isinstance(outcomes[0].error, ConnectionError)
        assert hook_log.failures == [("BeforeHook", "0-3")]

    @pytest.mark.asyncio
    async def test_sync_logger_supported(self) -> None:
        calls: list[str] = []

        runner = HookRunner(execute_hooks_with_args, lambda label, outcomes, cid: calls.append(cid))
        await runner.run_hook("before", "Test", HookSpec(None), [], "0-4")

        assert calls == ["0-4"]
