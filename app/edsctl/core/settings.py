"""Default settings file for the managed application.

The install flow writes ``config.toml`` into the configuration directory
only when no file is present. Existing files are validated, never
overwritten.
"""

import tomllib
from pathlib import Path
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

SETTINGS_HEADER = """\
# EvalEds Configuration File
# See https://github.com/prequired/evaleds for documentation
#
# Provider configurations are loaded from separate files or environment
# variables (OPENAI_API_KEY, ANTHROPIC_API_KEY, etc.)

"""


class DefaultsSettings(BaseModel):
    """The ``[defaults]`` table: numeric defaults for evaluation runs."""

    model_config = ConfigDict(extra="allow")

    temperature: Annotated[float, Field(ge=0.0, le=2.0)] = 0.7
    max_tokens: Annotated[int, Field(gt=0)] = 1000
    timeout_seconds: Annotated[int, Field(gt=0)] = 120
    max_concurrent: Annotated[int, Field(gt=0)] = 5
    retry_attempts: Annotated[int, Field(ge=0)] = 3


class AnalysisSettings(BaseModel):
    """The ``[analysis]`` table: analysis feature flags."""

    model_config = ConfigDict(extra="allow")

    enable_similarity_analysis: bool = True
    enable_content_analysis: bool = True
    enable_quality_assessment: bool = True
    similarity_threshold: Annotated[float, Field(ge=0.0, le=1.0)] = 0.7
    max_keywords: Annotated[int, Field(gt=0)] = 10


class AppSettings(BaseModel):
    """Complete settings file of the managed application.

    Unknown tables are allowed so files edited by newer application
    versions still validate.
    """

    model_config = ConfigDict(extra="allow")

    defaults: DefaultsSettings = Field(default_factory=DefaultsSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)


class SettingsError(Exception):
    """Raised when a settings file cannot be read or is invalid."""


def render_default_settings() -> str:
    """Render the default settings file content."""
    return SETTINGS_HEADER + tomli_w.dumps(AppSettings().model_dump())


def load_settings(path: Path) -> AppSettings:
    """Load and validate a settings file.

    Args:
        path: Path to ``config.toml``.

    Returns:
        Validated AppSettings.

    Raises:
        SettingsError: If the file cannot be read, parsed or validated.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML syntax in {path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read {path}: {e}") from e

    try:
        return AppSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {path}: {e}") from e
