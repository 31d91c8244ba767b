"""
Logging utilities for the No-Code Pipeline Builder.

Operations log structlog events such as ``custom_steps_scheduled`` or
``operation_completed`` with key/value context, rendered for a terminal or
as JSON lines for a host event-reporting layer. ``log_context`` scopes
run-wide keys (run id, phase) to the events emitted inside it.

Example:
    >>> from nocode_pipeline.config import LoggingSettings
    >>> from nocode_pipeline.utils import get_logger, log_context, setup_logging
    >>>
    >>> setup_logging(LoggingSettings(format="json"))
    >>> with log_context(phase="onCalibrationEnd"):
    ...     get_logger(__name__).info("phase_started", groups=3)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from nocode_pipeline.config.settings import LoggingSettings


def _renderer(format: str) -> Any:
    if format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def _processors(settings: LoggingSettings) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]
    if settings.include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    if settings.include_location:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            )
        )
    processors += [
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _renderer(settings.format),
    ]
    return processors


def setup_logging(settings: LoggingSettings | None = None, *, verbose: bool = False) -> None:
    """Configure structured logging on stderr.

    Args:
        settings: Logging section of the settings (defaults if None)
        verbose: Force DEBUG regardless of the configured level

    Raises:
        ValueError: If the configured level is not a logging level name
    """
    settings = settings or LoggingSettings()

    level_name = "DEBUG" if verbose else settings.level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {settings.level}")

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Attach ``kwargs`` to every event logged inside the block.

    Keys bound by an enclosing block are restored on exit.
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
