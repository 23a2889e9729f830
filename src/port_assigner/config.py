"""
Port Assigner Configuration

Loads the port range, secure-port flag and project list from defaults, an
optional YAML file and environment variable overrides, in that order.

Example file:

    port_range:
      min: 20000
      max: 30000
    enable_secure_port: true
    projects:
      - user-service
      - billing-service
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from .constants import ENV_VAR_PROJECTS, ENV_VAR_RANGE, ENV_VAR_SECURE_PORT
from .models.base import PortRange, ProjectName

logger = logging.getLogger(__name__)

_RANGE_PATTERN = re.compile(r"^\s*(\d+)\s*[-:]\s*(\d+)\s*$")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(ValueError):
    """Raised when configuration cannot be loaded or is invalid."""

    pass


class AssignerConfig(BaseModel):
    """Settings consumed by the port assigner."""

    port_range: PortRange = Field(default_factory=PortRange.default)
    enable_secure_port: bool = False
    projects: list[ProjectName] = Field(default_factory=list)

    model_config = {"frozen": True, "extra": "forbid"}

    def project_names(self) -> list[str]:
        """Configured project names as plain strings."""
        return [project.name for project in self.projects]


def parse_port_range(text: str) -> PortRange:
    """
    Parse a port range written as "MIN-MAX" (or "MIN:MAX").

    Raises:
        ConfigError: If the text is malformed or the bounds are invalid
    """
    match = _RANGE_PATTERN.match(text)
    if not match:
        raise ConfigError(f"Invalid port range '{text}', expected MIN-MAX")
    try:
        return PortRange(min=int(match.group(1)), max=int(match.group(2)))
    except ValidationError as e:
        raise ConfigError(f"Invalid port range '{text}': {e}") from e


def parse_bool(text: str) -> bool:
    """
    Parse a boolean flag such as "1", "true", "no" or "off".

    Raises:
        ConfigError: If the text is not a recognized boolean
    """
    value = text.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value '{text}'")


def _parse_projects(text: str) -> list[str]:
    return [name.strip() for name in text.split(",") if name.strip()]


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at top level")
    logger.debug(f"Loaded config file: {path}")
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}

    if environ.get(ENV_VAR_RANGE):
        port_range = parse_port_range(environ[ENV_VAR_RANGE])
        overrides["port_range"] = port_range.model_dump()

    if environ.get(ENV_VAR_SECURE_PORT):
        overrides["enable_secure_port"] = parse_bool(environ[ENV_VAR_SECURE_PORT])

    if environ.get(ENV_VAR_PROJECTS):
        overrides["projects"] = _parse_projects(environ[ENV_VAR_PROJECTS])

    if overrides:
        logger.debug(f"Environment overrides: {sorted(overrides)}")
    return overrides


def _normalize_projects(data: dict[str, Any]) -> dict[str, Any]:
    projects = data.get("projects")
    if isinstance(projects, list):
        data["projects"] = [
            {"name": item} if isinstance(item, str) else item for item in projects
        ]
    return data


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AssignerConfig:
    """
    Load the assigner configuration.

    Args:
        path: Optional YAML config file
        environ: Environment to read overrides from (defaults to os.environ)

    Returns:
        Validated AssignerConfig

    Raises:
        ConfigError: If the file or environment values are invalid
    """
    data: dict[str, Any] = {}
    if path is not None:
        data.update(_read_config_file(Path(path)))

    data.update(_env_overrides(os.environ if environ is None else environ))

    try:
        return AssignerConfig.model_validate(_normalize_projects(data))
    except ValidationError as e:
        source = f"config file {path}" if path is not None else "environment"
        raise ConfigError(f"Invalid configuration from {source}: {e}") from e
