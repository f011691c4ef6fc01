"""Value objects passed between the wrapper and its collaborators.

Every instance is created fresh for one wrapper call and discarded when
the call returns or raises.  :class:`RetryState` is the only mutable
record; it is shared by reference with the execution strategy so the
strategy can count attempts.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from specwrap.errors import InvalidRetryLimitError

# Resolves the argument list of a hook from the per-invocation context
ArgsProducer = Callable[[Any], list[Any]]


@dataclass
class RetryState:
    """Attempt counter and retry limit for one logical test.

    ``limit`` is fixed when the state is created.  ``attempts`` is only
    ever advanced by the execution strategy, never by the wrapper.
    """

    attempts: int = 0
    limit: int = 0

    def __post_init__(self) -> None:
        if self.limit < 0:
            raise InvalidRetryLimitError(f"retry limit must be >= 0, got {self.limit}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "limit" and "limit" in self.__dict__:
            raise AttributeError("RetryState.limit is fixed for the call")
        super().__setattr__(name, value)

    @property
    def remaining(self) -> int:
        return max(self.limit - self.attempts, 0)

    @property
    def exhausted(self) -> bool:
        return self.attempts >= self.limit

    def record_attempt(self) -> int:
        """Count one more retry and return the new attempt number."""
        self.attempts += 1
        return self.attempts


@dataclass(frozen=True)
class SpecInvocation:
    """The test or hook body to run and the arguments to run it with."""

    spec_fn: Callable[..., Any]
    spec_fn_args: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class HookSpec:
    """Hook callbacks plus the producer of their argument list.

    ``hook_fn`` may be a single callable, a list of callables, or ``None``
    when nothing is registered.
    """

    hook_fn: Callable[..., Any] | list[Callable[..., Any]] | None
    args_fn: ArgsProducer = field(default=lambda _context: [])


@dataclass
class ExecutionOutcome:
    """What the dispatched spec function settled with."""

    result: Any = None
    error: Any = None
    duration: int = 0


@dataclass
class ReconciledResult:
    """Payload appended to the after-hook arguments.

    ``passed`` is derived from ``error`` and cannot be set independently.
    """

    retries: RetryState
    error: Any = None
    result: Any = None
    duration: int = 0
    passed: bool = field(init=False)

    def __post_init__(self) -> None:
        self.passed = self.error is None

    @classmethod
    def from_outcome(cls, outcome: ExecutionOutcome, retries: RetryState) -> ReconciledResult:
        return cls(
            retries=retries,
            error=outcome.error,
            result=outcome.result,
            duration=outcome.duration,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "retries": self.retries,
            "error": self.error,
            "result": self.result,
            "duration": self.duration,
            "passed": self.passed,
        }


@dataclass(frozen=True)
class HookOutcome:
    """Result of running one registered hook callback."""

    hook_name: str
    result: Any = None
    error: BaseException | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None
