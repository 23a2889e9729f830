"""
Core value types for port assignment as Pydantic models.

All models are frozen, so they are hashable and can be used as mapping keys.
"""

from __future__ import annotations

from typing import Annotated, Union

from pydantic import BaseModel, Field, model_validator

from ..constants import (
    DEFAULT_PORT_RANGE_END,
    DEFAULT_PORT_RANGE_START,
    MAX_PORT,
    MIN_PORT,
    TLS_KEY_SUFFIX,
)

PortNumber = Annotated[int, Field(ge=MIN_PORT, le=MAX_PORT)]


class ProjectName(BaseModel):
    """Opaque identifier of a project/service that needs ports."""

    name: str = Field(..., min_length=1, description="Project name e.g. user-service")

    model_config = {"frozen": True}

    @classmethod
    def of(cls, value: Union[ProjectName, str]) -> ProjectName:
        """Coerce a string or ProjectName into a ProjectName."""
        if isinstance(value, ProjectName):
            return value
        return cls(name=value)

    @property
    def plain(self) -> AllocationKey:
        """Key of the project's plain (HTTP) port."""
        return AllocationKey(project=self, tls=False)

    @property
    def with_tls(self) -> AllocationKey:
        """Key of the project's TLS port."""
        return AllocationKey(project=self, tls=True)

    def __str__(self) -> str:
        return self.name


class AllocationKey(BaseModel):
    """
    The unit a port is assigned to.

    Each project owns a plain key and, when secure ports are enabled, a TLS
    key. Keys are compared by (project, tls), so a TLS key never aliases a
    project whose name happens to end in the TLS suffix.
    """

    project: ProjectName
    tls: bool = False

    model_config = {"frozen": True}

    @property
    def hash_input(self) -> str:
        """String fed to the stable hash to compute the preferred slot."""
        if self.tls:
            return self.project.name + TLS_KEY_SUFFIX
        return self.project.name

    def __str__(self) -> str:
        return self.hash_input


class PortRange(BaseModel):
    """Inclusive range of ports [min, max]."""

    min: PortNumber
    max: PortNumber

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_bounds(self) -> PortRange:
        """Validate that the lower bound does not exceed the upper bound."""
        if self.min > self.max:
            raise ValueError(
                f"Port range lower bound {self.min} must not exceed upper bound {self.max}"
            )
        return self

    @classmethod
    def default(cls) -> PortRange:
        """Return the dynamic/private port range."""
        return cls(min=DEFAULT_PORT_RANGE_START, max=DEFAULT_PORT_RANGE_END)

    @property
    def size(self) -> int:
        """Number of ports in the range."""
        return self.max - self.min + 1

    def includes(self, port: int) -> bool:
        """Check whether a port lies inside the range."""
        return self.min <= port <= self.max

    def port_at(self, slot: int) -> int:
        """Convert a zero-based slot into a port number."""
        if not 0 <= slot < self.size:
            raise IndexError(f"Slot {slot} outside range of size {self.size}")
        return self.min + slot

    def slot_of(self, port: int) -> int:
        """Convert a port number into its zero-based slot."""
        if not self.includes(port):
            raise ValueError(f"Port {port} outside range {self}")
        return port - self.min

    def __str__(self) -> str:
        return f"{self.min}-{self.max}"
