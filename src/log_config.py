"""Structured logging configuration.

structlog is set up once per invocation. Output goes to stderr so it never
mixes with command output on stdout. Two modes:

- dev: human-readable console lines (default)
- prod: one JSON object per line

Event names use dot notation, e.g. "store.loaded", "task.status_changed".
"""
from __future__ import annotations
import logging
import sys
from typing import Any, List, Optional, TextIO

import structlog

from config import DEFAULT_LOG_LEVEL, DEFAULT_LOG_MODE, ENV_LOG_LEVEL, ENV_LOG_MODE, get_setting

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def level_from_name(name: Optional[str]) -> int:
    if not name:
        return LOG_LEVELS[DEFAULT_LOG_LEVEL]
    return LOG_LEVELS.get(name.strip().upper(), LOG_LEVELS[DEFAULT_LOG_LEVEL])


def configure_logging(verbose: bool = False, mode: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """Configure structlog for this process.

    Args:
        verbose: Force DEBUG level regardless of TASKMANAGER_LOG_LEVEL.
        mode: "dev" or "prod"; defaults to TASKMANAGER_LOG_MODE.
        stream: Destination file object; defaults to sys.stderr.
    """
    level = logging.DEBUG if verbose else level_from_name(get_setting(ENV_LOG_LEVEL))
    mode = (mode or get_setting(ENV_LOG_MODE, DEFAULT_LOG_MODE) or DEFAULT_LOG_MODE).lower()

    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if mode == "prod":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )
