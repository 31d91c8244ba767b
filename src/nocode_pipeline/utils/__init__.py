"""
Utility functions for the No-Code Pipeline Builder.

Logging:
- setup_logging(): Configure structured logging with structlog
- get_logger(name): Get a logger instance
- log_context(): Scope run-wide keys to the events logged inside a block
"""

from nocode_pipeline.utils.logging import get_logger, log_context, setup_logging

__all__ = [
    "get_logger",
    "log_context",
    "setup_logging",
]
