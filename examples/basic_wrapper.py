"""Example: wrapping test bodies with before/after hooks.

Runs one async test, one flaky blocking test with retries, and one test
whose assertion library records a failure without raising.
"""

import asyncio
from types import SimpleNamespace

from specwrap import test_fn_wrapper
from specwrap.core.models import HookSpec, SpecInvocation
from specwrap.observability.logging import configure_logging, get_logger

configure_logging(log_level="INFO", json_format=False)
log = get_logger("specwrap.example")


# ── Hooks ────────────────────────────────────────────────────────────


def before_test(title: str) -> None:
    log.info("▶ %s", title)


async def after_test(context: SimpleNamespace, title: str, result: object) -> None:
    log.info("■ %s passed=%s duration=%sms", title, result.passed, result.duration)


def hooks_for(context: SimpleNamespace) -> tuple[HookSpec, HookSpec]:
    before = HookSpec(before_test, lambda ctx: [ctx.title])
    after = HookSpec(after_test, lambda ctx: [ctx, ctx.title])
    return before, after


# ── Test bodies ──────────────────────────────────────────────────────


async def opens_dashboard() -> str:
    await asyncio.sleep(0.05)
    return "dashboard"


_attempts = {"count": 0}


def flaky_login() -> str:
    _attempts["count"] += 1
    if _attempts["count"] < 2:
        raise ConnectionError("login page not ready")
    return "logged in"


# ── Main ─────────────────────────────────────────────────────────────


async def main() -> None:
    ctx = SimpleNamespace(title="opens dashboard")
    before, after = hooks_for(ctx)
    print(await test_fn_wrapper(ctx, "Test", SpecInvocation(opens_dashboard), before, after, "0-0"))

    ctx = SimpleNamespace(title="flaky login")
    before, after = hooks_for(ctx)
    print(
        await test_fn_wrapper(
            ctx, "Test", SpecInvocation(flaky_login), before, after, "0-1", repeat_limit=2
        )
    )

    ctx = SimpleNamespace(
        title="recorded failure",
        failed_expectations=[AssertionError("expected 'Home' to equal 'Dashboard'")],
    )
    before, after = hooks_for(ctx)
    try:
        await test_fn_wrapper(ctx, "Test", SpecInvocation(lambda: None), before, after, "0-2")
    except AssertionError as exc:
        print(f"failed: {exc}")


if __name__ == "__main__":
    asyncio.run(main())
