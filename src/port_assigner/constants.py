"""
Shared constants for port assignment.
"""

# Default range: IANA dynamic/private ports
DEFAULT_PORT_RANGE_START = 49152
DEFAULT_PORT_RANGE_END = 65535

MIN_PORT = 1
MAX_PORT = 65535

# Appended to a project name to form the hash input and display name of its TLS key
TLS_KEY_SUFFIX = "|tls"

# Environment variable overrides
ENV_VAR_RANGE = "PORT_ASSIGNER_RANGE"
ENV_VAR_SECURE_PORT = "PORT_ASSIGNER_SECURE_PORT"
ENV_VAR_PROJECTS = "PORT_ASSIGNER_PROJECTS"

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
