"""
Result of a port assignment run.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Union

from .base import AllocationKey, PortRange, ProjectName

ProjectLike = Union[ProjectName, str]


class PortAssignment(Mapping[AllocationKey, int]):
    """
    Read-only, injective mapping from AllocationKey to port.

    Iteration follows the order in which keys were expanded. Looking up a
    ProjectName or plain string returns the project's plain port.
    """

    def __init__(self, port_range: PortRange, ports: Mapping[AllocationKey, int]):
        self._port_range = port_range
        self._ports: dict[AllocationKey, int] = dict(ports)

    @property
    def port_range(self) -> PortRange:
        """Range the ports were drawn from."""
        return self._port_range

    def __getitem__(self, key: Union[AllocationKey, ProjectLike]) -> int:
        if not isinstance(key, AllocationKey):
            key = ProjectName.of(key).plain
        return self._ports[key]

    def __iter__(self) -> Iterator[AllocationKey]:
        return iter(self._ports)

    def __len__(self) -> int:
        return len(self._ports)

    def __repr__(self) -> str:
        items = ", ".join(f"{key}={port}" for key, port in self._ports.items())
        return f"PortAssignment(range={self._port_range}, {items})"

    def plain_port(self, project: ProjectLike) -> int:
        """
        Get the plain port of a project.

        Raises:
            KeyError: If the project was not part of the assignment
        """
        return self._ports[ProjectName.of(project).plain]

    def tls_port(self, project: ProjectLike) -> int:
        """
        Get the TLS port of a project.

        Raises:
            KeyError: If the project was not assigned a TLS port
        """
        return self._ports[ProjectName.of(project).with_tls]

    def has_tls(self, project: ProjectLike) -> bool:
        """Check whether a project was assigned a TLS port."""
        return ProjectName.of(project).with_tls in self._ports

    def projects(self) -> list[ProjectName]:
        """Projects in the assignment, in expansion order."""
        seen: dict[ProjectName, None] = {}
        for key in self._ports:
            seen.setdefault(key.project, None)
        return list(seen)

    def to_dict(self) -> dict[str, int]:
        """
        Return the assignment keyed by display name (e.g. "web", "web|tls").

        Raises:
            ValueError: If two keys share a display name, which only happens
                when a project is itself named "<other project>|tls"
        """
        result: dict[str, int] = {}
        for key, port in self._ports.items():
            name = str(key)
            if name in result:
                raise ValueError(
                    f"Display name '{name}' is shared by two allocation keys; "
                    f"use serialize_by_project() instead"
                )
            result[name] = port
        return result
