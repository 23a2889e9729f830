"""
Port Assigner command line interface.

Prints the ports assigned to a set of projects so that a dev tool (or a
shell script) can configure its service listeners.

Usage:
    port-assigner user-service billing-service --range 20000-30000 --secure-port
    port-assigner --config ports.yaml --format env
"""

import argparse
import logging
import re
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from .config import ConfigError, load_config, parse_port_range
from .constants import LOG_FORMAT
from .core.port_allocator import RangeTooSmallError, compute_projects_port
from .models.assignment import PortAssignment
from .models.serializers import serialize_to_json, serialize_to_yaml

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RANGE_TOO_SMALL = 1
EXIT_USAGE = 2


def _configure_logging(level: int, log_file: Optional[str] = None) -> None:
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)
        logger.debug(f"Logging to file: {log_file}")


def _env_name(project: str) -> str:
    return re.sub(r"[^A-Za-z0-9]", "_", project).upper()


def format_env(assignment: PortAssignment) -> str:
    """
    Render an assignment as NAME_PORT=... / NAME_TLS_PORT=... lines.

    Raises:
        ConfigError: If two ports would be written to the same variable
    """
    owners: dict[str, str] = {}
    lines = []

    def _add(variable: str, owner: str, port: int) -> None:
        if variable in owners:
            raise ConfigError(
                f"Projects '{owners[variable]}' and '{owner}' both map to "
                f"environment variable {variable}; rename one of them"
            )
        owners[variable] = owner
        lines.append(f"{variable}={port}")

    for project in assignment.projects():
        name = _env_name(project.name)
        _add(f"{name}_PORT", project.name, assignment.plain_port(project))
        if assignment.has_tls(project):
            _add(f"{name}_TLS_PORT", f"{project.name} (TLS)", assignment.tls_port(project))
    return "\n".join(lines) + ("\n" if lines else "")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="port-assigner",
        description="Assign stable, unique ports to a set of projects.",
    )
    parser.add_argument(
        "projects",
        nargs="*",
        metavar="PROJECT",
        help="Project names, in order (overrides configured projects)",
    )
    parser.add_argument(
        "--config",
        help="YAML config file with port_range, enable_secure_port and projects",
    )
    parser.add_argument(
        "--range",
        dest="port_range",
        metavar="MIN-MAX",
        help="Inclusive port range, e.g. 20000-30000",
    )
    secure = parser.add_mutually_exclusive_group()
    secure.add_argument(
        "--secure-port",
        dest="secure_port",
        action="store_true",
        default=None,
        help="Also assign a TLS port to every project",
    )
    secure.add_argument(
        "--no-secure-port",
        dest="secure_port",
        action="store_false",
        help="Assign only the plain port",
    )
    parser.add_argument(
        "--format",
        choices=["json", "yaml", "env"],
        default="json",
        help="Output format (default: json)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings")
    parser.add_argument("--log-file", help="Also append logs to this file")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    _configure_logging(level, args.log_file)

    try:
        config = load_config(args.config)
        port_range = parse_port_range(args.port_range) if args.port_range else config.port_range
    except ConfigError as e:
        logger.error(str(e))
        return EXIT_USAGE

    projects = args.projects or config.project_names()
    enable_secure_port = (
        config.enable_secure_port if args.secure_port is None else args.secure_port
    )
    if not projects:
        logger.error("No projects given on the command line or in the configuration")
        return EXIT_USAGE

    try:
        assignment = compute_projects_port(port_range, projects, enable_secure_port)
    except RangeTooSmallError as e:
        logger.error(str(e))
        return EXIT_RANGE_TOO_SMALL
    except ValidationError as e:
        logger.error(f"Invalid project name: {e}")
        return EXIT_USAGE

    if args.format == "yaml":
        output = serialize_to_yaml(assignment)
    elif args.format == "env":
        try:
            output = format_env(assignment)
        except ConfigError as e:
            logger.error(str(e))
            return EXIT_USAGE
    else:
        output = serialize_to_json(assignment) + "\n"
    sys.stdout.write(output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
