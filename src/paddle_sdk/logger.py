"""structlog based logger setup."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

_ROOT = "paddle_sdk"
_FORMATS = ("json", "text")


def _renderer(format: str) -> structlog.types.Processor:
    if format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def _install_handler(level: int, stream: TextIO) -> None:
    root = logging.getLogger(_ROOT)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(level)
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False


def new_logger(
    level: str = "INFO",
    format: str = "json",
    name: str = _ROOT,
    stream: TextIO | None = None,
) -> structlog.stdlib.BoundLogger:
    """Route SDK log records to ``stream`` and return a logger.

    SDK modules log through ``structlog.stdlib.get_logger(__name__)``. Loggers
    are not cached, so calling this again reconfigures loggers that already
    logged.

    Args:
        level: log level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        format: output format ("json" or "text")
        name: logger name
        stream: destination, stdout by default

    Raises:
        ValueError: unknown ``format``.
    """
    if format not in _FORMATS:
        raise ValueError(f"unknown log format: {format!r} (expected one of {_FORMATS})")
    log_level = getattr(logging, level.upper(), logging.INFO)
    _install_handler(log_level, stream or sys.stdout)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if format == "json":
        processors.append(structlog.processors.format_exc_info)
    processors.append(_renderer(format))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    return structlog.stdlib.get_logger(name)
