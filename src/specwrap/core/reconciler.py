"""Reconciliation of spec errors with assertion failure records.

Some assertion libraries do not raise on a failed expectation.  They
record it on the context object that is passed as the first after-hook
argument instead.  The reconciler folds that record into the same error
slot a raised exception would occupy, with the raised exception taking
precedence.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from specwrap.core.stacktrace import apply_stack_filter
from specwrap.errors import AssertionFailure

FAILED_EXPECTATIONS_KEYS = ("failed_expectations", "failedExpectations")
MATCHER_MARKER_KEYS = ("matcher_name", "matcherName")


def _lookup(obj: Any, keys: tuple[str, ...]) -> Any:
    for key in keys:
        if isinstance(obj, Mapping):
            if key in obj:
                return obj[key]
        elif hasattr(obj, key):
            return getattr(obj, key)
    return None


def first_failed_expectation(after_args: list[Any]) -> Any:
    """Return the first recorded failed expectation, or ``None``."""
    if not after_args or not after_args[0]:
        return None
    failures = _lookup(after_args[0], FAILED_EXPECTATIONS_KEYS)
    if not failures:
        return None
    return failures[0]


def is_matcher_failure(error: Any) -> bool:
    """``True`` when *error* was already reported by an assertion matcher."""
    return bool(_lookup(error, MATCHER_MARKER_KEYS))


def reconcile(raw_error: Any, after_args: list[Any]) -> Any:
    """Pick the error to report for the run.

    A raised error wins and has its stack filtered.  Otherwise the first
    failed expectation on ``after_args[0]`` is promoted.  Returns ``None``
    when neither exists.
    """
    if raw_error is not None:
        return apply_stack_filter(raw_error)
    return first_failed_expectation(after_args)


def should_propagate(error: Any) -> bool:
    return error is not None and not is_matcher_failure(error)


def resolve(error: Any, result: Any) -> Any:
    """Raise *error* unless it is absent or matcher-marked, else return *result*."""
    if not should_propagate(error):
        return result
    if isinstance(error, BaseException):
        raise error
    raise AssertionFailure(error)
