"""
Port Assigner Allocator

Deterministic port assignment for a set of concurrently launched projects.

Each project is expanded into one or two allocation keys (plain and, when
secure ports are enabled, TLS). Every key prefers the slot given by a stable
hash of its name. Keys alone in their preferred slot always get it; keys that
share a slot are then placed, in project order, on the next free slot,
wrapping around the end of the range. Adding or removing colliding projects
therefore never moves a project whose slot is uncontested.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Optional, Union

from ..models.assignment import PortAssignment
from ..models.base import AllocationKey, PortRange, ProjectName
from .hashing import string_hash

logger = logging.getLogger(__name__)

ProjectLike = Union[ProjectName, str]


class PortAllocationError(Exception):
    """Base class for port allocation failures."""

    pass


class RangeTooSmallError(PortAllocationError, ValueError):
    """Raised when the port range cannot hold one port per allocation key."""

    def __init__(
        self,
        required: int,
        available: int,
        project_count: int,
        enable_secure_port: bool,
        port_range: Optional[PortRange] = None,
    ):
        self.required = required
        self.available = available
        self.project_count = project_count
        self.enable_secure_port = enable_secure_port
        self.port_range = port_range

        message = (
            f"A larger port range is needed: {project_count} project(s) require "
            f"{required} port(s) but only {available} are available"
        )
        if port_range is not None:
            message += f" in range {port_range}"
        message += "."
        if enable_secure_port:
            message += (
                " With secure ports enabled the range must hold at least twice "
                "the number of projects."
            )
        super().__init__(message)


def expand_projects(
    projects: Iterable[ProjectLike], enable_secure_port: bool
) -> list[AllocationKey]:
    """
    Expand projects into their allocation keys.

    Each project contributes its plain key, immediately followed by its TLS
    key when secure ports are enabled. Project order is preserved since it
    decides which contested key is placed first.

    Args:
        projects: Ordered project names
        enable_secure_port: Whether to add a TLS key per project

    Returns:
        Ordered list of allocation keys
    """
    keys: list[AllocationKey] = []
    seen: set[ProjectName] = set()
    for project in projects:
        name = ProjectName.of(project)
        if name in seen:
            logger.warning(f"Ignoring duplicate project: {name}")
            continue
        seen.add(name)
        keys.append(name.plain)
        if enable_secure_port:
            keys.append(name.with_tls)
    return keys


def expanded_key_count(projects: Iterable[ProjectLike], enable_secure_port: bool) -> int:
    """Number of ports needed for the given projects."""
    return len(expand_projects(projects, enable_secure_port))


def preferred_slot(key: AllocationKey, port_range: PortRange) -> int:
    """Zero-based slot a key occupies when nothing collides with it."""
    return string_hash(key.hash_input) % port_range.size


def preferred_port(key: AllocationKey, port_range: PortRange) -> int:
    """Port a key occupies when nothing collides with it."""
    return port_range.min + preferred_slot(key, port_range)


def _first_free_slot(start: int, occupied: list[bool]) -> int:
    """
    Find the first unoccupied slot scanning forward from start, wrapping around.

    Raises:
        RuntimeError: If every slot is occupied
    """
    size = len(occupied)
    for offset in range(size):
        slot = (start + offset) % size
        if not occupied[slot]:
            return slot
    raise RuntimeError(f"No free slot among {size} slot(s)")


def resolve_collisions(
    keys: Sequence[AllocationKey],
    port_range: PortRange,
    project_count: Optional[int] = None,
    enable_secure_port: Optional[bool] = None,
) -> dict[AllocationKey, int]:
    """
    Assign a unique port to every key.

    Solo keys (alone in their preferred slot) are assigned first and always
    receive their preferred port. Contested keys are then assigned in their
    original order, each taking the first free slot scanning forward from
    its preferred slot and wrapping to the start of the range.

    Args:
        keys: Ordered, distinct allocation keys
        port_range: Range to draw ports from
        project_count: Reported in RangeTooSmallError (derived from keys if None)
        enable_secure_port: Reported in RangeTooSmallError (derived from keys if None)

    Returns:
        Mapping of key to port, in the order of ``keys``

    Raises:
        ValueError: If a key appears more than once
        RangeTooSmallError: If the range has fewer ports than there are keys
    """
    if len(set(keys)) != len(keys):
        duplicates = sorted({str(key) for key in keys if keys.count(key) > 1})
        raise ValueError(f"Duplicate allocation keys: {', '.join(duplicates)}")

    size = port_range.size
    if len(keys) > size:
        raise RangeTooSmallError(
            required=len(keys),
            available=size,
            project_count=(
                len({key.project for key in keys}) if project_count is None else project_count
            ),
            enable_secure_port=(
                any(key.tls for key in keys) if enable_secure_port is None else enable_secure_port
            ),
            port_range=port_range,
        )

    buckets: dict[int, list[AllocationKey]] = {}
    for key in keys:
        buckets.setdefault(preferred_slot(key, port_range), []).append(key)

    occupied = [False] * size
    slots: dict[AllocationKey, int] = {}

    for slot, bucket in buckets.items():
        if len(bucket) == 1:
            slots[bucket[0]] = slot
            occupied[slot] = True

    contested = [key for key in keys if key not in slots]
    for key in contested:
        start = preferred_slot(key, port_range)
        slot = _first_free_slot(start, occupied)
        occupied[slot] = True
        slots[key] = slot
        logger.debug(
            f"Contested key {key}: preferred port {port_range.min + start}, "
            f"assigned {port_range.min + slot}"
        )

    logger.info(
        f"Assigned {len(keys)} port(s) in range {port_range}: "
        f"{len(keys) - len(contested)} solo, {len(contested)} contested"
    )
    return {key: port_range.min + slots[key] for key in keys}


def compute_projects_port(
    port_range: PortRange,
    projects: Sequence[ProjectLike],
    enable_secure_port: bool,
) -> PortAssignment:
    """
    Compute the ports of a set of projects.

    The result only depends on the range, the project order and the secure
    port flag, so it is identical across calls and across processes.

    Args:
        port_range: Inclusive range to draw ports from
        projects: Ordered project names (ProjectName or str)
        enable_secure_port: Whether each project also gets a TLS port

    Returns:
        PortAssignment mapping each allocation key to its port

    Raises:
        RangeTooSmallError: If the range cannot hold all required ports
    """
    keys = expand_projects(projects, enable_secure_port)
    project_count = len(keys) // 2 if enable_secure_port else len(keys)

    logger.debug(
        f"Computing ports for {project_count} project(s) in range {port_range} "
        f"(secure ports {'enabled' if enable_secure_port else 'disabled'})"
    )
    ports = resolve_collisions(
        keys,
        port_range,
        project_count=project_count,
        enable_secure_port=enable_secure_port,
    )
    return PortAssignment(port_range, ports)
