"""Tests for configuration module."""

from pathlib import Path

import pytest

from forge_export.config import (
    Config,
    ExportConfig,
    _clear_config_cache,
    get_config,
    load_config,
)
from forge_export.export import ExportOptions


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.toml"


class TestDefaultConfig:
    """Tests for default configuration when no file exists."""

    def test_missing_file_returns_defaults(self, config_path):
        config = load_config(config_path)

        assert isinstance(config, Config)
        assert config.export.default_format == "md"
        assert config.export.style == "minimal"
        assert config.export.content_types == ["transcript"]
        assert config.pdf.browser == "chromium"
        assert config.pdf.timeout_ms == 30000

    def test_default_output_dir(self):
        assert "~/.forge/exports" in ExportConfig().output_dir


class TestLoadConfigFromFile:
    """Tests for loading config from a TOML file."""

    def test_parses_export(self, config_path):
        config_path.write_text(
            """
[export]
default_format = "docx"
style = "professional"
language = "he"
content_types = ["transcript", "decisions"]
include_timestamps = false
output_dir = "/custom/exports"
"""
        )
        config = load_config(config_path)

        assert config.export.default_format == "docx"
        assert config.export.style == "professional"
        assert config.export.language == "he"
        assert config.export.content_types == ["transcript", "decisions"]
        assert config.export.include_timestamps is False
        assert config.export.output_dir == "/custom/exports"

    def test_merges_with_defaults(self, config_path):
        config_path.write_text(
            """
[pdf]
timeout_ms = 5000
"""
        )
        config = load_config(config_path)

        assert config.pdf.timeout_ms == 5000
        assert config.pdf.browser == "chromium"
        assert config.export.default_format == "md"

    def test_invalid_toml_falls_back_to_defaults(self, config_path, caplog):
        config_path.write_text("[export\ndefault_format = ")

        with caplog.at_level("WARNING", logger="forge_export.config"):
            config = load_config(config_path)

        assert config.export.default_format == "md"
        assert "using defaults" in caplog.text

    def test_invalid_value_falls_back_to_defaults(self, config_path, caplog):
        config_path.write_text(
            """
[pdf]
timeout_ms = 10
"""
        )
        with caplog.at_level("WARNING", logger="forge_export.config"):
            config = load_config(config_path)

        assert config.pdf.timeout_ms == 30000
        assert "Invalid config" in caplog.text


class TestExportConfig:
    def test_output_dir_expands_home(self):
        path = ExportConfig(output_dir="~/exports").get_output_dir()
        assert "~" not in str(path)
        assert str(path).startswith(str(Path.home()))

    def test_to_options_resolves(self):
        options = ExportOptions.resolve(ExportConfig(default_format="json", language="he").to_options())

        assert options.format == "json"
        assert options.language == "he"
        assert options.content_types == ["transcript"]
        assert options.include_agent_metadata is False


def test_get_config_is_cached(monkeypatch, config_path):
    config_path.write_text('[export]\ndefault_format = "html"\n')
    monkeypatch.setattr("forge_export.config.DEFAULT_CONFIG_PATH", config_path)
    _clear_config_cache()
    try:
        first = get_config()
        assert first.export.default_format == "html"
        assert get_config() is first
    finally:
        _clear_config_cache()
