"""Logging setup for programs embedding nel sessions.

Library modules only call ``structlog.get_logger()``; applications call
:func:`configure_logging` once at startup.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

import structlog

DEBUG_ENV_VAR = "NEL_DEBUG"


def debug_enabled() -> bool:
    """Check whether debug logging was requested through the environment."""
    return os.environ.get(DEBUG_ENV_VAR, "").lower() in ("1", "true", "yes", "on")


def configure_logging(debug: Optional[bool] = None) -> None:
    """Render structured logs to stderr.

    Args:
        debug: Log at DEBUG level; when None, read ``NEL_DEBUG``
    """
    if debug is None:
        debug = debug_enabled()

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
