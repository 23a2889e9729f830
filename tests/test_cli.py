"""Tests for the port-assigner command line interface."""

import json
import logging

import pytest
import yaml

from port_assigner.cli import (
    EXIT_OK,
    EXIT_RANGE_TOO_SMALL,
    EXIT_USAGE,
    build_parser,
    format_env,
    main,
)
from port_assigner.config import ConfigError
from port_assigner.core.port_allocator import compute_projects_port


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args(["web"])
        assert args.projects == ["web"]
        assert args.secure_port is None
        assert args.format == "json"

    def test_secure_port_flags(self):
        parser = build_parser()
        assert parser.parse_args(["--secure-port"]).secure_port is True
        assert parser.parse_args(["--no-secure-port"]).secure_port is False


class TestMain:
    """Tests for main()."""

    def test_json_output(self, capsys):
        exit_code = main(["--range", "7-14", "--secure-port", "AaAa", "user"])

        assert exit_code == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert data["port_range"] == {"min": 7, "max": 14}
        assert data["projects"] == {
            "AaAa": {"port": 7, "tls_port": 14},
            "user": {"port": 10, "tls_port": 9},
        }

    def test_yaml_output(self, capsys):
        exit_code = main(["--range", "7-14", "--format", "yaml", "AaAa", "user"])

        assert exit_code == EXIT_OK
        data = yaml.safe_load(capsys.readouterr().out)
        assert data["projects"] == {"AaAa": {"port": 7}, "user": {"port": 10}}

    def test_env_output(self, capsys):
        exit_code = main(["--range", "7-14", "--secure-port", "--format", "env", "AaAa", "user"])

        assert exit_code == EXIT_OK
        assert capsys.readouterr().out.splitlines() == [
            "AAAA_PORT=7",
            "AAAA_TLS_PORT=14",
            "USER_PORT=10",
            "USER_TLS_PORT=9",
        ]

    def test_projects_and_flags_from_config(self, capsys, write_config):
        path = write_config(
            {
                "port_range": {"min": 7, "max": 14},
                "enable_secure_port": True,
                "projects": ["AaAa", "BBBB", "user"],
            }
        )

        exit_code = main(["--config", str(path)])

        assert exit_code == EXIT_OK
        projects = json.loads(capsys.readouterr().out)["projects"]
        assert projects["BBBB"] == {"port": 8, "tls_port": 11}

    def test_command_line_overrides_config(self, capsys, write_config):
        path = write_config(
            {"port_range": {"min": 7, "max": 14}, "enable_secure_port": True, "projects": ["x"]}
        )

        exit_code = main(["--config", str(path), "--no-secure-port", "AaAa"])

        assert exit_code == EXIT_OK
        assert json.loads(capsys.readouterr().out)["projects"] == {"AaAa": {"port": 7}}

    def test_range_too_small(self, capsys):
        exit_code = main(["--range", "1-1", "--secure-port", "a", "b"])

        assert exit_code == EXIT_RANGE_TOO_SMALL
        assert capsys.readouterr().out == ""

    def test_no_projects(self):
        assert main(["--range", "7-14"]) == EXIT_USAGE

    def test_invalid_range(self):
        assert main(["--range", "14-7", "web"]) == EXIT_USAGE

    def test_missing_config_file(self, tmp_path):
        assert main(["--config", str(tmp_path / "missing.yaml"), "web"]) == EXIT_USAGE

    def test_invalid_project_name(self):
        assert main(["--range", "7-14", ""]) == EXIT_USAGE

    def test_log_file(self, tmp_path, capsys):
        log_file = tmp_path / "port-assigner.log"
        root = logging.getLogger()
        handlers_before = list(root.handlers)

        try:
            exit_code = main(["--range", "7-14", "--log-file", str(log_file), "web"])
        finally:
            for handler in root.handlers[:]:
                if handler not in handlers_before:
                    root.removeHandler(handler)
                    handler.close()

        assert exit_code == EXIT_OK
        assert log_file.exists()


def test_format_env_sanitizes_names(small_range):
    assignment = compute_projects_port(small_range, ["user-service"], False)
    assert format_env(assignment).startswith("USER_SERVICE_PORT=")


@pytest.mark.parametrize(
    "projects,secure,variable",
    [
        (["a.b", "a_b"], False, "A_B_PORT"),
        (["web", "web-tls"], True, "WEB_TLS_PORT"),
    ],
)
def test_format_env_rejects_clashing_variables(wide_range, projects, secure, variable):
    """Distinct projects never silently share an environment variable."""
    assignment = compute_projects_port(wide_range, projects, secure)

    with pytest.raises(ConfigError) as exc_info:
        format_env(assignment)

    message = str(exc_info.value)
    assert variable in message
    assert projects[0] in message
    assert projects[1] in message


def test_format_env_variables_are_unique(wide_range):
    """Every line of a successful render sets a different variable."""
    assignment = compute_projects_port(wide_range, ["web", "api", "user-service"], True)
    names = [line.split("=")[0] for line in format_env(assignment).splitlines()]

    assert len(names) == 6
    assert len(set(names)) == len(names)


def test_main_env_format_with_clashing_names(capsys):
    """Clashing environment names exit with a usage error and no output."""
    exit_code = main(["--range", "20000-30000", "--format", "env", "a.b", "a_b"])

    assert exit_code == EXIT_USAGE
    assert capsys.readouterr().out == ""
