"""Structured logging via structlog.

Configures structlog once per process. Library modules keep using
`logging.getLogger(__name__)`; the stdlib bridge routes those records to
the same stream.

Renderer selection:
  debug=True   `ConsoleRenderer` with colours for local use.
  debug=False  `JSONRenderer` for machine-parseable logs.

Logs go to stderr by default so CLI commands can print JSON on stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def resolve_level(level: str) -> int:
    """Map a level name to its stdlib constant, defaulting to INFO."""
    return _LEVELS.get(level.lower(), logging.INFO)


def configure_structlog(
    debug: bool = False,
    level: str = "info",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for the process lifetime.

    Calling multiple times is safe; the last call wins.
    """
    stream = stream or sys.stderr
    numeric_level = logging.DEBUG if debug else resolve_level(level)

    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        stream=stream,
        level=numeric_level,
        force=True,
    )
