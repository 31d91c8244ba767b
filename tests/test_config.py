"""
Tests for configuration module.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from nocode_pipeline.config.settings import (
    LoggingSettings,
    PipelineSettings,
    Settings,
    _apply_env_overrides,
    _find_config_files,
    _load_toml,
    _merge_dicts,
    get_settings,
    load_settings,
)


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run from an empty directory with no NOCODE_* variables set."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("NOCODE_"):
            monkeypatch.delenv(key)
    return tmp_path


class TestPipelineSettings:
    """Tests for PipelineSettings."""

    def test_default_values(self):
        settings = PipelineSettings()
        assert settings.output_dir == "output"
        assert settings.instructions_path is None
        assert settings.manifest_path is None
        assert settings.plugins_dir is None

    def test_unknown_keys_ignored(self):
        settings = PipelineSettings(output_dir="/tmp/x", workers=4)
        assert settings.output_dir == "/tmp/x"
        assert not hasattr(settings, "workers")


class TestLoggingSettings:
    """Tests for LoggingSettings."""

    def test_default_values(self):
        settings = LoggingSettings()
        assert settings.level == "INFO"
        assert settings.format == "console"
        assert settings.include_timestamp is True
        assert settings.include_location is False


class TestSettings:
    """Tests for the main Settings container."""

    def test_default_values(self):
        settings = Settings()
        assert settings.name == "nocode-pipeline"
        assert settings.output_dir == Path("output")
        assert settings.instructions_path is None

    def test_relative_paths_use_base_dir(self):
        settings = Settings(
            base_dir=Path("/data/run"),
            pipeline={"instructions_path": "steps.toml", "plugins_dir": "plugins"},
        )
        assert settings.instructions_path == Path("/data/run/steps.toml")
        assert settings.plugins_dir == Path("/data/run/plugins")
        assert settings.output_dir == Path("/data/run/output")

    def test_absolute_paths_kept(self):
        settings = Settings(base_dir=Path("/data/run"), pipeline={"manifest_path": "/etc/groups.toml"})
        assert settings.manifest_path == Path("/etc/groups.toml")


class TestMergeDicts:
    """Tests for _merge_dicts function."""

    def test_nested_merge(self):
        base = {"pipeline": {"output_dir": "a", "plugins_dir": "p"}}
        override = {"pipeline": {"output_dir": "b"}}
        assert _merge_dicts(base, override) == {"pipeline": {"output_dir": "b", "plugins_dir": "p"}}

    def test_base_unchanged(self):
        base = {"a": 1}
        _merge_dicts(base, {"a": 2})
        assert base == {"a": 1}


class TestFindConfigFiles:
    """Tests for _find_config_files function."""

    def test_no_config_files(self, isolated):
        assert _find_config_files() == []

    def test_default_and_local(self, isolated):
        config_dir = isolated / "config"
        config_dir.mkdir()
        default_file = config_dir / "default.toml"
        default_file.write_text('[pipeline]\noutput_dir = "d"\n')
        local_file = config_dir / "local.toml"
        local_file.write_text('[pipeline]\noutput_dir = "l"\n')

        assert [p.resolve() for p in _find_config_files()] == [default_file.resolve(), local_file.resolve()]

    def test_env_config_path(self, isolated, monkeypatch):
        env_file = isolated / "env_config.toml"
        env_file.write_text("")
        monkeypatch.setenv("NOCODE_CONFIG_PATH", str(env_file))

        assert env_file in _find_config_files()

    def test_env_config_path_nonexistent(self, isolated, monkeypatch):
        monkeypatch.setenv("NOCODE_CONFIG_PATH", "/nonexistent/config.toml")
        assert _find_config_files() == []


class TestLoadToml:
    """Tests for _load_toml function."""

    def test_load_nested_toml(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text('[logging]\nlevel = "DEBUG"\n')
        assert _load_toml(path) == {"logging": {"level": "DEBUG"}}


class TestApplyEnvOverrides:
    """Tests for _apply_env_overrides function."""

    def test_section_override(self, isolated, monkeypatch):
        monkeypatch.setenv("NOCODE_PIPELINE_OUTPUT_DIR", "/scratch/out")
        result = _apply_env_overrides({})
        assert result["pipeline"]["output_dir"] == "/scratch/out"

    def test_boolean_override(self, isolated, monkeypatch):
        monkeypatch.setenv("NOCODE_LOGGING_INCLUDE_LOCATION", "yes")
        monkeypatch.setenv("NOCODE_LOGGING_INCLUDE_TIMESTAMP", "false")
        result = _apply_env_overrides({})
        assert result["logging"] == {"include_location": True, "include_timestamp": False}

    def test_top_level_override(self, isolated, monkeypatch):
        monkeypatch.setenv("NOCODE_NAME", "night-run")
        assert _apply_env_overrides({})["name"] == "night-run"

    def test_unknown_keys_ignored(self, isolated, monkeypatch):
        monkeypatch.setenv("NOCODE_PIPELINE_WORKERS", "4")
        monkeypatch.setenv("NOCODE_CONFIG_PATH", "/x.toml")
        assert _apply_env_overrides({}) == {}


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_load_defaults(self, isolated):
        settings = load_settings()
        assert isinstance(settings, Settings)
        assert settings.pipeline.output_dir == "output"

    def test_load_merges_configs(self, isolated):
        config_dir = isolated / "config"
        config_dir.mkdir()
        (config_dir / "default.toml").write_text(
            """
[pipeline]
output_dir = "default-out"
plugins_dir = "plugins"
"""
        )
        (config_dir / "local.toml").write_text(
            """
[pipeline]
output_dir = "local-out"
"""
        )

        settings = load_settings()

        assert settings.pipeline.output_dir == "local-out"
        assert settings.pipeline.plugins_dir == "plugins"

    def test_explicit_path_with_env_override(self, isolated, monkeypatch):
        config_file = isolated / "explicit.toml"
        config_file.write_text('name = "custom"\n[logging]\nlevel = "WARNING"\n')
        monkeypatch.setenv("NOCODE_LOGGING_LEVEL", "DEBUG")

        settings = load_settings(config_file)

        assert settings.name == "custom"
        assert settings.logging.level == "DEBUG"


class TestGetSettings:
    """Tests for cached settings access."""

    def test_cached_per_path(self, isolated):
        get_settings.cache_clear()
        config_file = isolated / "run.toml"
        config_file.write_text('name = "night-run"\n')

        default = get_settings()
        explicit = get_settings(config_file)

        assert get_settings() is default
        assert get_settings(config_file) is explicit
        assert default.name == "nocode-pipeline"
        assert explicit.name == "night-run"
        get_settings.cache_clear()

    def test_cache_clear_reloads(self, isolated):
        get_settings.cache_clear()
        first = get_settings()

        get_settings.cache_clear()

        assert get_settings() is not first
        get_settings.cache_clear()
