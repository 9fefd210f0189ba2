"""Unit tests for the default settings file.

Tests for rendering the default config.toml and validating existing files.
"""

import tomllib
from pathlib import Path

import pytest
from edsctl.core.settings import (
    SETTINGS_HEADER,
    AppSettings,
    SettingsError,
    load_settings,
    render_default_settings,
)


class TestRenderDefaultSettings:
    """Tests for render_default_settings function."""

    def test_starts_with_header(self) -> None:
        """The rendered file starts with the comment header."""
        content = render_default_settings()
        assert content.startswith(SETTINGS_HEADER)
        assert content.startswith("# EvalEds Configuration File")

    def test_default_values(self) -> None:
        """The rendered file carries the documented defaults."""
        data = tomllib.loads(render_default_settings())

        assert data["defaults"] == {
            "temperature": 0.7,
            "max_tokens": 1000,
            "timeout_seconds": 120,
            "max_concurrent": 5,
            "retry_attempts": 3,
        }
        assert data["analysis"] == {
            "enable_similarity_analysis": True,
            "enable_content_analysis": True,
            "enable_quality_assessment": True,
            "similarity_threshold": 0.7,
            "max_keywords": 10,
        }

    def test_rendered_file_loads(self, tmp_path: Path) -> None:
        """The rendered defaults validate."""
        path = tmp_path / "config.toml"
        path.write_text(render_default_settings())
        assert load_settings(path) == AppSettings()


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_partial_file(self, tmp_path: Path) -> None:
        """Missing keys take their defaults."""
        path = tmp_path / "config.toml"
        path.write_text("[defaults]\ntemperature = 0.2\n")

        settings = load_settings(path)

        assert settings.defaults.temperature == 0.2
        assert settings.defaults.max_tokens == 1000
        assert settings.analysis.max_keywords == 10

    def test_unknown_tables_allowed(self, tmp_path: Path) -> None:
        """Tables written by newer application versions are accepted."""
        path = tmp_path / "config.toml"
        path.write_text('[providers.openai]\nmodel = "gpt-4o"\n')
        load_settings(path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises SettingsError."""
        path = tmp_path / "config.toml"
        path.write_text("[defaults\n")
        with pytest.raises(SettingsError, match="Invalid TOML syntax"):
            load_settings(path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        """Out-of-range values raise SettingsError."""
        path = tmp_path / "config.toml"
        path.write_text("[analysis]\nsimilarity_threshold = 3.0\n")
        with pytest.raises(SettingsError, match="Invalid settings"):
            load_settings(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises SettingsError."""
        with pytest.raises(SettingsError, match="Failed to read"):
            load_settings(tmp_path / "missing.toml")
