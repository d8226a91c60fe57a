"""
uiforge configuration models.

Parses a `uiforge.toml` file, or the `[tool.uiforge]` table of a
`pyproject.toml`, into typed configuration.
"""

from __future__ import annotations

import logging
import os
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigError
from .naming import NamingPolicy

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "uiforge.toml"
LOG_LEVEL_ENV = "UIFORGE_LOG_LEVEL"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class NamingPolicyKind(str, Enum):
    """Built-in naming policies."""

    NONE = "none"
    CONVENTIONAL = "conventional"


class FieldsLayout(str, Enum):
    """Container used for default show/form layouts."""

    STACKED = "stacked"
    INLINE = "inline"


class NamingConfig(BaseModel):
    """Extra keys added on top of the selected naming policy."""

    model_config = ConfigDict(extra="ignore")

    disabled: list[str] = Field(default_factory=list)
    hidden: list[str] = Field(default_factory=list)
    omitted: list[str] = Field(default_factory=list)


class UiForgeConfig(BaseModel):
    """Complete uiforge configuration."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    naming_policy: NamingPolicyKind = NamingPolicyKind.NONE
    naming: NamingConfig = Field(default_factory=NamingConfig)
    default_fields_layout: FieldsLayout = FieldsLayout.STACKED
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize to an upper-case standard level name."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level '{v}'")
        return level

    def build_naming_policy(self) -> NamingPolicy:
        """Naming policy selected by `naming_policy`, extended by `naming`."""
        if self.naming_policy == NamingPolicyKind.CONVENTIONAL:
            base = NamingPolicy.conventional()
        else:
            base = NamingPolicy()
        return base.extend(
            disabled=self.naming.disabled,
            hidden=self.naming.hidden,
            omitted=self.naming.omitted,
        )


def _parse(data: dict[str, Any], source: Path) -> UiForgeConfig:
    if LOG_LEVEL_ENV in os.environ:
        data = {**data, "log_level": os.environ[LOG_LEVEL_ENV]}
    try:
        return UiForgeConfig(**data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid uiforge configuration in {source}: {e}") from e


def load_config(toml_path: Path) -> UiForgeConfig:
    """
    Load configuration from a TOML file.

    A `pyproject.toml` is read from its `[tool.uiforge]` table; any other
    file is read from its top level.

    Args:
        toml_path: Path to uiforge.toml or pyproject.toml

    Returns:
        UiForgeConfig with parsed values or defaults
    """
    if not toml_path.exists():
        logger.debug(f"No uiforge configuration at {toml_path}, using defaults")
        return _parse({}, toml_path)

    with open(toml_path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Cannot parse {toml_path}: {e}") from e

    if toml_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("uiforge", {})

    return _parse(data, toml_path)


def find_config(project_root: Path) -> UiForgeConfig:
    """
    Locate and load the configuration for a project directory.

    `uiforge.toml` takes precedence over `pyproject.toml`.
    """
    for candidate in (project_root / CONFIG_FILENAME, project_root / "pyproject.toml"):
        if candidate.exists():
            logger.info(f"Loading uiforge configuration from {candidate}")
            return load_config(candidate)
    return _parse({}, project_root)
