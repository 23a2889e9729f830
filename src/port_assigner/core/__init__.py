"""
Port Assigner Core Module

Stable hashing and the collision-resolving port allocator.
"""

from .hashing import string_hash
from .port_allocator import (
    PortAllocationError,
    RangeTooSmallError,
    compute_projects_port,
    expand_projects,
    expanded_key_count,
    preferred_port,
    preferred_slot,
    resolve_collisions,
)

__all__ = [
    # Hashing
    "string_hash",
    # Port allocator
    "PortAllocationError",
    "RangeTooSmallError",
    "compute_projects_port",
    "expand_projects",
    "expanded_key_count",
    "preferred_port",
    "preferred_slot",
    "resolve_collisions",
]
