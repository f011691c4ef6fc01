"""Runtime settings for specwrap.

Settings are read from ``SPECWRAP_*`` environment variables so that a
test runner can tune logging and the default retry strategies without
code changes::

    SPECWRAP_LOG_LEVEL=DEBUG SPECWRAP_RETRY_DELAY=0.5 pytest
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class WrapperSettings:
    """Immutable configuration shared by the default collaborators."""

    log_level: str = "INFO"
    json_logs: bool = True
    retry_delay_seconds: float = 0.0

    @classmethod
    def from_env(cls) -> WrapperSettings:
        """Build settings from the process environment."""
        delay = float(os.environ.get("SPECWRAP_RETRY_DELAY", "0") or 0)
        if delay < 0:
            raise ValueError(f"SPECWRAP_RETRY_DELAY must be >= 0, got {delay}")
        return cls(
            log_level=os.environ.get("SPECWRAP_LOG_LEVEL", "INFO").upper(),
            json_logs=os.environ.get("SPECWRAP_JSON_LOGS", "true").lower() in _TRUTHY,
            retry_delay_seconds=delay,
        )


def get_settings() -> WrapperSettings:
    """Return settings for the current environment."""
    return WrapperSettings.from_env()
