"""Retry loops used by the default execution strategies.

Both loops are driven by a shared :class:`RetryState`: a failed call is
repeated while ``attempts < limit`` and every repeat advances
``attempts`` so the wrapper can report how often the body ran.  The
delay between attempts grows exponentially from
:attr:`RetryPolicy.base_delay_seconds`.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import random
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from specwrap.core.models import RetryState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Immutable pacing configuration for retries."""

    base_delay_seconds: float = 0.0
    max_delay_seconds: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = False

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait before retry number *attempt* (1-based)."""
        if self.base_delay_seconds <= 0:
            return 0.0
        delay = min(
            self.base_delay_seconds * (self.exponential_base ** (attempt - 1)),
            self.max_delay_seconds,
        )
        if self.jitter:
            delay *= random.uniform(0.5, 1.5)
        return delay


def _log_retry(func: Callable[..., Any], exc: BaseException, retries: RetryState, delay: float) -> None:
    logger.warning(
        "%s failed (%s), retry %d/%d in %.2fs",
        getattr(func, "__qualname__", repr(func)),
        exc,
        retries.attempts,
        retries.limit,
        delay,
    )


async def retry_async(
    func: Callable[..., Any],
    retries: RetryState,
    args: Sequence[Any] = (),
    policy: RetryPolicy | None = None,
) -> Any:
    """Call *func* with *args*, awaiting its result, retrying on failure.

    The last exception is re-raised once ``retries`` is exhausted.
    """
    policy = policy or RetryPolicy()
    while True:
        try:
            result = func(*args)
            if inspect.isawaitable(result):
                result = await result
            return result
        except Exception as exc:
            if retries.exhausted:
                raise
            attempt = retries.record_attempt()
            delay = policy.delay_for(attempt)
            _log_retry(func, exc, retries, delay)
            if delay:
                await asyncio.sleep(delay)


def retry_blocking(
    func: Callable[..., Any],
    retries: RetryState,
    args: Sequence[Any] = (),
    policy: RetryPolicy | None = None,
) -> Any:
    """Blocking counterpart of :func:`retry_async`."""
    policy = policy or RetryPolicy()
    while True:
        try:
            return func(*args)
        except Exception as exc:
            if retries.exhausted:
                raise
            attempt = retries.record_attempt()
            delay = policy.delay_for(attempt)
            _log_retry(func, exc, retries, delay)
            if delay:
                time.sleep(delay)
