"""Exception types raised by specwrap itself.

Spec failures are always re-raised as the original exception object.
The types below only cover misuse of the wrapper and failure records
that are not exceptions and therefore cannot be raised directly.
"""

from __future__ import annotations

from typing import Any

# attributes copied from a failure record onto its carrier
_CARRIED_FIELDS = ("stack", "matcher_name", "matcherName")


class SpecwrapError(Exception):
    """Base class for errors originating in specwrap."""


class InvalidRetryLimitError(SpecwrapError, ValueError):
    """Raised when a negative retry limit is requested."""


class AssertionFailure(SpecwrapError, AssertionError):
    """Raisable carrier for an assertion record that is not an exception.

    Some assertion libraries record failed expectations as plain objects
    or mappings.  When such a record has to reach the caller it is raised
    inside this type; the record itself stays available as :attr:`record`.
    The record's stack and matcher marker are mirrored on the carrier.
    """

    def __init__(self, record: Any) -> None:
        self.record = record
        message = _field(record, "message") or repr(record)
        super().__init__(message)
        for name in _CARRIED_FIELDS:
            value = _field(record, name)
            if value is not None:
                setattr(self, name, value)


def unwrap_failure(error: Any) -> Any:
    """Return the record behind an :class:`AssertionFailure`, else *error*."""
    if isinstance(error, AssertionFailure):
        return error.record
    return error


def _field(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)
