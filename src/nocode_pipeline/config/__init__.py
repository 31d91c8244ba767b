"""
Configuration for the No-Code Pipeline Builder.

``get_settings`` returns the cached Settings for a config file, or for the
default file search when no path is given.

Example:
    >>> from nocode_pipeline.config import get_settings
    >>>
    >>> settings = get_settings()
    >>> print(settings.pipeline.instructions_path)
"""

from nocode_pipeline.config.settings import (
    LoggingSettings,
    PipelineSettings,
    Settings,
    get_settings,
    load_settings,
)

__all__ = [
    "LoggingSettings",
    "PipelineSettings",
    "Settings",
    "get_settings",
    "load_settings",
]
