"""Configuration management for forge-export.

Configuration is loaded from ~/.forge/config.toml with sensible defaults.

Example config file:
    [export]
    default_format = "pdf"
    style = "professional"
    language = "he"
    content_types = ["transcript", "decisions"]
    include_timestamps = true
    include_system_messages = false
    output_dir = "~/.forge/exports"

    [pdf]
    browser = "chromium"
    timeout_ms = 30000
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

# Use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".forge" / "config.toml"


class ExportConfig(BaseModel):
    """Default export options for the command line."""

    default_format: str = "md"
    style: str = "minimal"
    language: str = "en"
    content_types: list[str] = Field(default_factory=lambda: ["transcript"])
    include_timestamps: bool = True
    include_system_messages: bool = False
    output_dir: str = "~/.forge/exports"

    def get_output_dir(self) -> Path:
        return Path(self.output_dir).expanduser()

    def to_options(self) -> dict[str, Any]:
        """Export options mapping that command-line flags are layered over."""
        return {
            "format": self.default_format,
            "style": self.style,
            "language": self.language,
            "content_types": list(self.content_types),
            "include_timestamps": self.include_timestamps,
            "include_system_messages": self.include_system_messages,
        }


class PdfConfig(BaseModel):
    """Headless browser settings for PDF rendering."""

    browser: str = "chromium"
    timeout_ms: int = Field(default=30000, ge=1000)


class Config(BaseModel):
    """Main configuration model for forge-export."""

    export: ExportConfig = Field(default_factory=ExportConfig)
    pdf: PdfConfig = Field(default_factory=PdfConfig)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from a TOML file.

    If the file doesn't exist, returns the default configuration.
    Partial configurations are merged with defaults.

    Args:
        config_path: Path to the config file. Defaults to ~/.forge/config.toml.

    Returns:
        Config object with loaded or default values.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    default_config = Config()

    if not config_path.exists():
        return default_config

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to read config %s, using defaults: %s", config_path, e)
        return default_config

    try:
        return _merge_config(default_config, data)
    except ValidationError as e:
        logger.warning("Invalid config %s, using defaults: %s", config_path, e)
        return default_config


def _merge_config(default: Config, data: dict[str, Any]) -> Config:
    """Merge loaded config data with defaults.

    Args:
        default: Default configuration.
        data: Loaded TOML data.

    Returns:
        Merged Config object.

    Raises:
        ValidationError: If a loaded value has the wrong type.
    """
    export_data = data.get("export", {})
    export = ExportConfig(
        default_format=export_data.get("default_format", default.export.default_format),
        style=export_data.get("style", default.export.style),
        language=export_data.get("language", default.export.language),
        content_types=export_data.get("content_types", default.export.content_types),
        include_timestamps=export_data.get("include_timestamps", default.export.include_timestamps),
        include_system_messages=export_data.get(
            "include_system_messages", default.export.include_system_messages
        ),
        output_dir=export_data.get("output_dir", default.export.output_dir),
    )

    pdf_data = data.get("pdf", {})
    pdf = PdfConfig(
        browser=pdf_data.get("browser", default.pdf.browser),
        timeout_ms=pdf_data.get("timeout_ms", default.pdf.timeout_ms),
    )

    return Config(export=export, pdf=pdf)


# Global config cache
_config_cache: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Loads from ~/.forge/config.toml on first call, then returns cached instance.

    Returns:
        The global Config instance.
    """
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache


def _clear_config_cache() -> None:
    """Clear the config cache. Used for testing."""
    global _config_cache
    _config_cache = None
