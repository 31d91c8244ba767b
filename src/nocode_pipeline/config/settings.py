"""
Settings for the No-Code Pipeline Builder.

Settings come from pydantic defaults, then TOML files, then ``NOCODE_*``
environment variables. Without an explicit file, ``config/default.toml``,
``config/local.toml`` and ``NOCODE_CONFIG_PATH`` are merged in that order.
CLI options override the resolved paths at the call site.

Example:
    >>> from nocode_pipeline.config import get_settings
    >>>
    >>> settings = get_settings(Path("night.toml"))
    >>> print(settings.output_dir)
"""

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "NOCODE_"


class PipelineSettings(BaseModel):
    """Custom step pipeline settings."""

    model_config = ConfigDict(extra="ignore")

    output_dir: str = Field(
        default="output",
        description="Root directory for custom step outputs",
    )
    instructions_path: str | None = Field(
        default=None,
        description="Instruction tree TOML file",
    )
    manifest_path: str | None = Field(
        default=None,
        description="Frame group manifest TOML file",
    )
    plugins_dir: str | None = Field(
        default=None,
        description="Directory of transform plugin modules",
    )


class LoggingSettings(BaseModel):
    """Logging settings."""

    model_config = ConfigDict(extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="console", description="Output format")
    include_timestamp: bool = Field(default=True)
    include_location: bool = Field(default=False)


class Settings(BaseModel):
    """Main settings container."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="nocode-pipeline")
    base_dir: Path = Field(default=Path("."))

    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def _resolve(self, value: str | None) -> Path | None:
        if value is None:
            return None
        path = Path(value)
        if path.is_absolute():
            return path
        return self.base_dir / path

    @property
    def output_dir(self) -> Path:
        """Get output directory."""
        return self._resolve(self.pipeline.output_dir) or self.base_dir

    @property
    def instructions_path(self) -> Path | None:
        return self._resolve(self.pipeline.instructions_path)

    @property
    def manifest_path(self) -> Path | None:
        return self._resolve(self.pipeline.manifest_path)

    @property
    def plugins_dir(self) -> Path | None:
        return self._resolve(self.pipeline.plugins_dir)


CONFIG_CANDIDATES = ("config/default.toml", "config/local.toml")


def _find_config_files() -> list[Path]:
    """Config files that exist, lowest priority first.

    Candidates are the project files under the working directory followed
    by ``NOCODE_CONFIG_PATH``.
    """
    candidates = [Path.cwd() / name for name in CONFIG_CANDIDATES]
    env_config = os.environ.get(f"{ENV_PREFIX}CONFIG_PATH")
    if env_config:
        candidates.append(Path(env_config))
    return [path for path in candidates if path.is_file()]


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``; tables merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _merge_dicts(current, value)
        merged[key] = value
    return merged


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply ``NOCODE_*`` environment overrides to ``config``.

    ``NOCODE_<SECTION>_<FIELD>`` sets a section field, e.g.
    NOCODE_PIPELINE_OUTPUT_DIR -> pipeline.output_dir. ``NOCODE_<FIELD>``
    sets a top-level field. Unknown names are ignored.
    """
    sections: dict[str, type[BaseModel]] = {
        "pipeline": PipelineSettings,
        "logging": LoggingSettings,
    }

    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX) or key == f"{ENV_PREFIX}CONFIG_PATH":
            continue

        name = key[len(ENV_PREFIX) :].lower()
        section, _, field_name = name.partition("_")
        model = sections.get(section)

        if model is not None and field_name in model.model_fields:
            default = model.model_fields[field_name].default
            config.setdefault(section, {})[field_name] = _coerce(value, default)
        elif name in Settings.model_fields and name not in sections:
            config[name] = value

    return config


def _coerce(value: str, default: Any) -> Any:
    """Convert an env string to the type of the field default."""
    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(default, (int, float)):
        return type(default)(value)
    return value


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from TOML files and the environment.

    Args:
        config_path: Explicit config file; replaces the file search

    Returns:
        Settings instance
    """
    files = [Path(config_path)] if config_path else _find_config_files()

    config: dict[str, Any] = {}
    for path in files:
        config = _merge_dicts(config, _load_toml(path))

    return Settings(**_apply_env_overrides(config))


@lru_cache(maxsize=8)
def get_settings(config_path: Path | None = None) -> Settings:
    """Settings for ``config_path`` (or the default search), cached per path."""
    return load_settings(config_path)
