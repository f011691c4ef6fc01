"""Reporting of failed before/after hooks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


class HookErrorDetail(BaseModel):
    message: str
    type: str


class HookFailureReport(BaseModel):
    """Structured description of a failed hook, attached to the log record."""

    cid: str
    full_title: str
    error: HookErrorDetail
    failed_hooks: int = Field(default=1, ge=1)
    type: str = "hook"
    state: str = "fail"


def _outcome_error(outcome: Any) -> BaseException | None:
    if isinstance(outcome, BaseException):
        return outcome
    error = getattr(outcome, "error", None)
    return error if isinstance(error, BaseException) else None


async def log_hook_error(hook_label: str, outcomes: Sequence[Any] | None, cid: str) -> None:
    """Log the first hook failure among *outcomes*, if any.

    *outcomes* may hold :class:`HookOutcome` objects or raw exceptions as
    returned by custom hook invokers.
    """
    errors = [e for e in (_outcome_error(o) for o in outcomes or []) if e is not None]
    if not errors:
        return

    first = errors[0]
    report = HookFailureReport(
        cid=cid,
        full_title=f"{hook_label} Hook",
        error=HookErrorDetail(message=str(first), type=type(first).__name__),
        failed_hooks=len(errors),
    )
    logger.error(
        "%s failed: %s",
        report.full_title,
        report.error.message,
        extra={"cid": cid, "hook": hook_label, "report": report.model_dump()},
        exc_info=(type(first), first, first.__traceback__),
    )
