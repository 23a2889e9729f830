"""
Serialization utilities for port assignments.

Supports dict, JSON and YAML output. Ports are nested per project, so a
project named like another project's TLS key cannot shadow it.
"""

from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from .assignment import PortAssignment


def serialize_to_dict(assignment: PortAssignment) -> Dict[str, Any]:
    """
    Serialize an assignment to a dictionary.

    Args:
        assignment: The assignment to serialize

    Returns:
        Dictionary with the port range and the ports of each project
    """
    return {
        "port_range": assignment.port_range.model_dump(),
        "projects": serialize_by_project(assignment),
    }


def serialize_to_json(assignment: PortAssignment, indent: int = 2) -> str:
    """
    Serialize an assignment to a JSON string.

    Args:
        assignment: The assignment to serialize
        indent: JSON indentation level

    Returns:
        JSON string
    """
    return json.dumps(serialize_to_dict(assignment), indent=indent)


def serialize_to_yaml(assignment: PortAssignment) -> str:
    """
    Serialize an assignment to a YAML string.

    Args:
        assignment: The assignment to serialize

    Returns:
        YAML string, keys in assignment order
    """
    return yaml.safe_dump(
        serialize_to_dict(assignment),
        default_flow_style=False,
        sort_keys=False,
    )


def serialize_by_project(assignment: PortAssignment) -> Dict[str, Dict[str, int]]:
    """Group ports per project: {"web": {"port": 1, "tls_port": 2}}."""
    result: Dict[str, Dict[str, int]] = {}
    for project in assignment.projects():
        entry = {"port": assignment.plain_port(project)}
        if assignment.has_tls(project):
            entry["tls_port"] = assignment.tls_port(project)
        result[project.name] = entry
    return result
