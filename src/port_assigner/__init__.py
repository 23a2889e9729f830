"""
Port Assigner: deterministic ports for multi-service dev environments

Maps project names to ports from a bounded range so that every project keeps
the same port between runs, no two projects share a port, and each project
can optionally get a second port for TLS.
"""

__version__ = "0.1.0"

from .core import (
    PortAllocationError,
    RangeTooSmallError,
    compute_projects_port,
    string_hash,
)
from .models import AllocationKey, PortAssignment, PortRange, ProjectName

__all__ = [
    "AllocationKey",
    "PortAllocationError",
    "PortAssignment",
    "PortRange",
    "ProjectName",
    "RangeTooSmallError",
    "compute_projects_port",
    "string_hash",
]
