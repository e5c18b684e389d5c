"""Logging for resolution runs."""

from bidderround.monitoring.logging import emit, get_logger, setup_logging

__all__ = ["emit", "get_logger", "setup_logging"]
