"""Structured logging via structlog, JSON lines to stderr and optionally a file."""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import structlog


class _TeeWriter:
    """Write structured log lines to stderr and, when given, a log file."""

    def __init__(self, log_file: TextIO | None) -> None:
        self._log_file = log_file

    def write(self, message: str) -> None:
        if self._log_file is not None:
            self._log_file.write(message)
            self._log_file.flush()
        sys.stderr.write(message)

    def flush(self) -> None:
        if self._log_file is not None:
            self._log_file.flush()
        sys.stderr.flush()


def setup_logging(log_level: str = "INFO", log_file: str | None = None) -> None:
    """Configure structlog with JSON output to stderr (+ ``log_file`` if set)."""
    stream: TextIO | None = None
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        stream = open(log_file, "a")  # noqa: SIM115

    level = logging.getLevelName(log_level.upper())
    logging.basicConfig(level=level, stream=sys.stderr, format="%(message)s")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=_TeeWriter(stream)),
        cache_logger_on_first_use=True,
    )
