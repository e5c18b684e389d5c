"""Logging for resolution runs.

Events are structlog key/value records rendered once, by a stdlib
``ProcessorFormatter``, to stdout and to ``<log_dir>/bidderround.log``.

Logging is informational only. Code on the resolution path logs through
:func:`emit`, which never lets a failing sink change an outcome.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

LOG_FILE_NAME = "bidderround.log"


def setup_logging(level: str = "INFO", json_output: bool = True, log_dir: str = "logs") -> None:
    """Route structlog events through the root logger.

    ``json_output`` picks JSON lines over the coloured console renderer.
    Calling this again replaces the handlers instead of stacking them.
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    handlers: list[logging.Handler] = [
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(log_path / LOG_FILE_NAME),
    ]
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))

    # SQL echo is controlled by the database config, not the root level
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


def emit(logger: Any, level: str, event: str, **fields: Any) -> None:
    """Log ``event`` at ``level``; a sink failure is reported on stderr.

    Mirrors ``logging.Handler.handleError``: the caller carries on.
    Inside an ``except`` block ``level="exception"`` still attaches the
    active traceback.
    """
    try:
        getattr(logger, level)(event, **fields)
    except Exception as exc:  # noqa: BLE001
        sys.stderr.write(f"--- logging error: {event}: {exc!r}\n")
