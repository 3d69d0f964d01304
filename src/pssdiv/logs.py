"""structlog setup for pssdiv entry points.

Library modules only call ``structlog.get_logger()``; the CLI calls
:func:`configure_logging` once.  Log output goes to stderr so report
tables on stdout stay machine-readable.
"""

from __future__ import annotations

import logging
import sys

import structlog


def _stderr_logger_factory(*args) -> structlog.PrintLogger:
    # Look up sys.stderr per logger so redirected streams are honoured
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: str = "INFO", json: bool = False) -> None:
    """Configure structlog with a level filter and a console or JSON renderer.

    Parameters
    ----------
    level : str
        Minimum level name (DEBUG, INFO, WARNING, ERROR).
    json : bool
        Render one JSON object per line instead of the console format.
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )
