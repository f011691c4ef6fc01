"""Observability helpers for specwrap."""

from specwrap.observability.logging import JSONFormatter, configure_logging, get_logger

__all__ = ["JSONFormatter", "configure_logging", "get_logger"]
