"""
Tests for the bosh CLI executor using mocked subprocess calls.

Tests cover:
- argv and environment construction
- Timeout, spawn failure and non-zero exit mapping
- JSON decoding of structured output
- Availability and connectivity probes
- Resolved CLI path injection
"""

import subprocess
import sys
import time
from unittest.mock import patch

import pytest

from conftest import BoshResponse, json_table, make_config, timeout_response

from boshly.modules.errors import (
    CommandFailedError,
    CommandSpawnError,
    CommandTimeoutError,
    OutputParseError,
    TransientKind,
)
from boshly.modules.executor import CommandExecutor, classify_diagnostic, tokenize


@pytest.fixture
def cert_file(tmp_path):
    cert = tmp_path / "ca.pem"
    cert.write_text("-----BEGIN CERTIFICATE-----\nMIIB\n-----END CERTIFICATE-----\n")
    return cert


class TestInvocation:

    def test_argv_without_certificate(self, bosh_mocker):
        bosh_mocker.register("deployments", BoshResponse(stdout="ok\n"))
        executor = CommandExecutor(make_config(director="https://d"))

        assert executor.execute("deployments") == "ok"
        assert bosh_mocker.last_call.command == ["bosh", "-e", "https://d", "deployments"]

    def test_credentials_travel_in_environment(self, bosh_mocker, executor):
        bosh_mocker.register("deployments", BoshResponse(stdout="ok"))
        executor.execute("deployments")

        env = bosh_mocker.last_call.env
        assert env["BOSH_ENVIRONMENT"] == "https://10.0.0.6:25555"
        assert env["BOSH_CLIENT"] == "admin"
        assert env["BOSH_CLIENT_SECRET"] == "s3cret"
        assert "s3cret" not in bosh_mocker.last_call.full_command_str

    def test_existing_certificate_added(self, bosh_mocker, cert_file):
        bosh_mocker.register("vms", BoshResponse(stdout="ok"))
        executor = CommandExecutor(make_config(director="https://d", ca_cert_path=str(cert_file)))

        executor.execute("vms -d cf")

        call = bosh_mocker.last_call
        assert call.command == [
            "bosh", "-e", "https://d", "--ca-cert", str(cert_file), "vms", "-d", "cf",
        ]
        assert call.env["BOSH_CA_CERT"] == cert_file.read_text().strip()

    def test_missing_certificate_file_is_skipped(self, bosh_mocker, tmp_path):
        bosh_mocker.register("vms", BoshResponse(stdout="ok"))
        executor = CommandExecutor(
            make_config(director="https://d", ca_cert_path=str(tmp_path / "gone.pem"))
        )

        executor.execute("vms")

        assert "--ca-cert" not in bosh_mocker.last_call.command

    def test_tokens_split_on_whitespace(self):
        assert tokenize("  logs -d   cf  router/0 ") == ["logs", "-d", "cf", "router/0"]

    def test_extra_args_stay_single_arguments(self, bosh_mocker, executor):
        bosh_mocker.register("ssh", BoshResponse(stdout="done"))

        executor.execute("ssh -d cf router/0", ["-c", "ls -la /var/vcap"])

        assert bosh_mocker.last_call.command[-2:] == ["-c", "ls -la /var/vcap"]

    def test_timeout_passed_to_process(self, bosh_mocker):
        bosh_mocker.register("vms", BoshResponse(stdout="ok"))
        CommandExecutor(make_config(timeout_seconds=15)).execute("vms")

        assert bosh_mocker.last_call.timeout == 15


class TestFailures:

    def test_timeout_maps_to_transient_timeout(self, bosh_mocker):
        bosh_mocker.register("deployments", timeout_response(1))
        executor = CommandExecutor(make_config(timeout_seconds=1))

        with pytest.raises(CommandTimeoutError) as excinfo:
            executor.execute("deployments")

        assert excinfo.value.transient == TransientKind.TIMEOUT
        assert excinfo.value.exit_code == -1
        assert "timed out after 1 seconds" in str(excinfo.value)

    @pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell script")
    def test_hung_process_is_killed_at_timeout(self, tmp_path):
        script = tmp_path / "bosh"
        script.write_text("#!/bin/sh\nexec sleep 30\n")
        script.chmod(0o755)
        executor = CommandExecutor(make_config(cli_path=str(script), timeout_seconds=1))

        started = time.monotonic()
        with pytest.raises(CommandTimeoutError):
            executor.execute("deployments")
        elapsed = time.monotonic() - started

        assert 0.9 <= elapsed < 10

    def test_missing_binary_maps_to_spawn_failure(self, executor):
        with patch("subprocess.run", side_effect=FileNotFoundError("bosh")):
            with pytest.raises(CommandSpawnError) as excinfo:
                executor.execute("deployments")

        assert excinfo.value.transient == TransientKind.SPAWN_FAILURE

    def test_non_zero_exit_carries_stderr(self, bosh_mocker, executor):
        bosh_mocker.register(
            "deployments",
            BoshResponse(stdout="partial", stderr="Deployment 'cf' doesn't exist", returncode=1),
        )

        with pytest.raises(CommandFailedError) as excinfo:
            executor.execute("deployments")

        assert excinfo.value.exit_code == 1
        assert excinfo.value.output == "Deployment 'cf' doesn't exist"
        assert "Deployment 'cf' doesn't exist" in str(excinfo.value)
        assert excinfo.value.transient is None

    def test_non_zero_exit_falls_back_to_stdout(self, bosh_mocker, executor):
        bosh_mocker.register("deployments", BoshResponse(stdout="Expected task to succeed", returncode=1))

        with pytest.raises(CommandFailedError, match="Expected task to succeed"):
            executor.execute("deployments")

    def test_connection_refused_is_classified(self, bosh_mocker, executor):
        bosh_mocker.register(
            "deployments",
            BoshResponse(
                stderr="dial tcp 10.0.0.6:25555: connect: connection refused", returncode=1
            ),
        )

        with pytest.raises(CommandFailedError) as excinfo:
            executor.execute("deployments")

        assert excinfo.value.transient == TransientKind.CONNECTION_REFUSED

    @pytest.mark.parametrize(
        "text,kind",
        [
            ("dial tcp: lookup director.example on 10.0.0.2:53: no such host", TransientKind.DNS_FAILURE),
            ("read tcp 10.0.0.6:25555: i/o timeout", TransientKind.TIMEOUT),
            ("Director responded with non-successful status code '404'", None),
        ],
    )
    def test_classify_diagnostic(self, text, kind):
        assert classify_diagnostic(text) == kind


class TestStructuredOutput:

    def test_appends_json_flag_and_decodes(self, bosh_mocker, executor):
        bosh_mocker.register("deployments --json", BoshResponse(stdout=json_table({"name": "cf"})))

        result = executor.execute_structured("deployments")

        assert result["Tables"][0]["Rows"] == [{"name": "cf"}]
        assert bosh_mocker.last_call.command[-2:] == ["deployments", "--json"]

    def test_malformed_output_is_parse_error(self, bosh_mocker, executor):
        bosh_mocker.register("deployments", BoshResponse(stdout="Using environment '10.0.0.6'"))

        with pytest.raises(OutputParseError) as excinfo:
            executor.execute_structured("deployments")

        assert excinfo.value.output == "Using environment '10.0.0.6'"
        assert excinfo.value.transient is None

    def test_empty_output_is_parse_error(self, bosh_mocker, executor):
        bosh_mocker.register("deployments", BoshResponse(stdout="  \n"))

        with pytest.raises(OutputParseError):
            executor.execute_structured("deployments")


class TestProbes:

    def test_is_available(self, bosh_mocker, executor):
        bosh_mocker.register("--version", BoshResponse(stdout="version 7.9.5"))

        assert executor.is_available() is True
        assert bosh_mocker.last_call.command == ["bosh", "--version"]
        assert bosh_mocker.last_call.timeout == 5

    def test_is_available_never_raises(self, executor):
        with patch("subprocess.run", side_effect=FileNotFoundError("bosh")):
            assert executor.is_available() is False

        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("bosh", 5)):
            assert executor.is_available() is False

    def test_connection(self, bosh_mocker, executor):
        bosh_mocker.register("deployments --json", BoshResponse(stdout=json_table()))
        assert executor.test_connection() is True

    def test_connection_failure_returns_false(self, bosh_mocker, executor):
        bosh_mocker.register("deployments", BoshResponse(stderr="connection refused", returncode=1))
        assert executor.test_connection() is False


class TestCliPath:

    def test_defaults_to_configured_path(self):
        executor = CommandExecutor(make_config(cli_path="/usr/local/bin/bosh"))
        assert executor.cli_path == "/usr/local/bin/bosh"

    def test_uses_installed_binary(self, bosh_mocker, executor):
        bosh_mocker.register("deployments", BoshResponse(stdout="ok"))
        executor.set_cli_path_provider(lambda: "/tmp/bosh-cli/bosh")

        executor.execute("deployments")

        assert bosh_mocker.last_call.command[0] == "/tmp/bosh-cli/bosh"

    def test_bare_name_from_installer_keeps_configured_path(self):
        executor = CommandExecutor(
            make_config(cli_path="/opt/bosh"), cli_path_provider=lambda: "bosh"
        )
        assert executor.cli_path == "/opt/bosh"

    def test_unresolved_installer_keeps_configured_path(self):
        executor = CommandExecutor(make_config(cli_path="/opt/bosh"), cli_path_provider=lambda: None)
        assert executor.cli_path == "/opt/bosh"
