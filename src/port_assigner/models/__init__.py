"""
Port Assigner Models

Frozen Pydantic v2 models for projects, allocation keys and port ranges,
plus the PortAssignment result and its serializers.
"""

from .assignment import PortAssignment
from .base import AllocationKey, PortRange, ProjectName
from .serializers import (
    serialize_by_project,
    serialize_to_dict,
    serialize_to_json,
    serialize_to_yaml,
)

__all__ = [
    # Base types
    "AllocationKey",
    "PortRange",
    "ProjectName",
    # Result
    "PortAssignment",
    # Serialization
    "serialize_by_project",
    "serialize_to_dict",
    "serialize_to_json",
    "serialize_to_yaml",
]
