"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from specwrap.core import wrapper
from specwrap.core.models import HookOutcome
from specwrap.shim import execute_async, execute_hooks_with_args, run_sync


class RecordingHookLog:
    """Stand-in for ``log_hook_error`` that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[Any], str]] = []

    async def __call__(self, hook_label: str, outcomes: list[Any], cid: str) -> None:
        self.calls.append((hook_label, list(outcomes), cid))

    @property
    def failures(self) -> list[tuple[str, str]]:
        """``(label, cid)`` for every call that carried a failed outcome."""
        return [
            (label, cid)
            for label, outcomes, cid in self.calls
            if any(isinstance(o, HookOutcome) and o.failed for o in outcomes)
        ]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SPECWRAP_LOG_LEVEL", "SPECWRAP_JSON_LOGS", "SPECWRAP_RETRY_DELAY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def hook_log() -> RecordingHookLog:
    return RecordingHookLog()


@pytest.fixture()
def fn_wrapper(hook_log: RecordingHookLog) -> wrapper.TestFrameworkFnWrapper:
    return wrapper.TestFrameworkFnWrapper(
        execute_hooks_with_args,
        execute_async,
        run_sync,
        log_hook_error=hook_log,
    )
