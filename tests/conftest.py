"""
Shared pytest fixtures for Port Assigner tests.

This module provides fixtures for:
- Port ranges used by the concrete allocation scenarios
- Project names sharing the same 32-bit string hash
- Writing YAML config files to temp directories
- Isolating tests from PORT_ASSIGNER_* environment variables
"""

from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from port_assigner.constants import ENV_VAR_PROJECTS, ENV_VAR_RANGE, ENV_VAR_SECURE_PORT
from port_assigner.models import PortRange


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch):
    """Remove PORT_ASSIGNER_* overrides so tests see default configuration."""
    for name in (ENV_VAR_RANGE, ENV_VAR_SECURE_PORT, ENV_VAR_PROJECTS):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def small_range() -> PortRange:
    """Range [7, 14], small enough to force collisions and wrap-around."""
    return PortRange(min=7, max=14)


@pytest.fixture
def wide_range() -> PortRange:
    """Range [20000, 30000]."""
    return PortRange(min=20000, max=30000)


@pytest.fixture
def colliding_names() -> list[str]:
    """Three names with the same 32-bit polynomial hash (2031744)."""
    return ["AaAa", "AaBB", "BBBB"]


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[Any], Path]:
    """Return a helper that dumps data as YAML into a temp config file."""

    def _write(data: Any, name: str = "ports.yaml") -> Path:
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write
