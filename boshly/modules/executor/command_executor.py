"""
BOSH CLI command executor.

Turns a logical command such as ``"vms -d cf"`` into a ``bosh`` process:

    <bosh> -e <director> [--ca-cert <path>] vms -d cf

Credentials travel in the child environment (BOSH_ENVIRONMENT, BOSH_CLIENT,
BOSH_CLIENT_SECRET, BOSH_CA_CERT). One short-lived process is spawned per
call; retrying is the caller's job.
"""

import json
import logging
import os
import re
import subprocess
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from boshly.config.provider import DEFAULT_CLI_PATH
from boshly.modules.config import EffectiveConfig
from boshly.modules.errors import (
    CommandFailedError,
    CommandSpawnError,
    CommandTimeoutError,
    OutputParseError,
    TransientKind,
)

logger = logging.getLogger("boshly.executor")

JSON_FLAG = "--json"
AVAILABILITY_TIMEOUT_SECONDS = 5
CONNECTION_TEST_COMMAND = "deployments"

# Diagnostic text emitted by the bosh CLI (Go net errors) mapped to transient kinds
_TRANSIENT_PATTERNS: List[Tuple[re.Pattern, TransientKind]] = [
    (re.compile(r"connection refused", re.IGNORECASE), TransientKind.CONNECTION_REFUSED),
    (re.compile(r"no such host|name resolution|lookup .* on .*:53", re.IGNORECASE),
     TransientKind.DNS_FAILURE),
    (re.compile(r"i/o timeout|timed out|timeout", re.IGNORECASE), TransientKind.TIMEOUT),
]


def classify_diagnostic(text: str) -> Optional[TransientKind]:
    """Map CLI diagnostic output to a transient kind, if it looks transient."""
    for pattern, kind in _TRANSIENT_PATTERNS:
        if pattern.search(text):
            return kind
    return None


def tokenize(command: str) -> List[str]:
    """Split a logical command on whitespace, dropping empty tokens."""
    return command.split()


@dataclass(frozen=True)
class CommandInvocation:
    """A single bosh process call, built fresh for every command."""

    argv: Tuple[str, ...]
    env_overlay: Dict[str, str] = field(default_factory=dict)
    timeout: float = 60
    stdout: str = ""
    stderr: str = ""
    exit_code: Optional[int] = None

    @property
    def display(self) -> str:
        """Command line for logs. Credentials live in the env overlay, not argv."""
        return " ".join(self.argv)

    @property
    def diagnostic(self) -> str:
        """stderr if present, otherwise stdout."""
        return self.stderr.strip() or self.stdout.strip()


class CommandExecutor:
    """Builds and runs bosh CLI invocations for one EffectiveConfig."""

    def __init__(
        self,
        config: EffectiveConfig,
        cli_path_provider: Optional[Callable[[], Optional[str]]] = None,
    ):
        self.config = config
        self._cli_path_provider = cli_path_provider

    def set_cli_path_provider(self, provider: Callable[[], Optional[str]]) -> None:
        """
        Inject the installer's resolved-path accessor.

        Called once both the executor and the installer exist and before any
        command is issued.
        """
        self._cli_path_provider = provider

    @property
    def cli_path(self) -> str:
        """Installed binary when one was resolved, else the configured path."""
        if self._cli_path_provider is not None:
            installed = self._cli_path_provider()
            if installed and installed != DEFAULT_CLI_PATH:
                return installed
        return self.config.cli_path

    def _existing_ca_cert(self) -> Optional[Path]:
        # Checked on every call, the file may appear or vanish at runtime
        if not self.config.ca_cert_path:
            return None
        cert = Path(self.config.ca_cert_path)
        if cert.is_file():
            return cert
        logger.warning(f"CA certificate file not found: {cert}")
        return None

    def build_invocation(
        self, command: str, extra_args: Sequence[str] = ()
    ) -> CommandInvocation:
        """
        Build argv and environment overlay for a logical command.

        ``extra_args`` are appended verbatim after the command tokens, for
        values that must stay a single argument (a remote shell command).
        """
        argv = [self.cli_path, "-e", self.config.director]
        env = {
            "BOSH_ENVIRONMENT": self.config.director,
            "BOSH_CLIENT": self.config.client,
            "BOSH_CLIENT_SECRET": self.config.client_secret,
        }

        cert = self._existing_ca_cert()
        if cert is not None:
            argv.extend(["--ca-cert", str(cert)])
            try:
                env["BOSH_CA_CERT"] = cert.read_text(encoding="utf-8").strip()
            except OSError as e:
                logger.warning(f"Failed to read CA certificate from {cert}: {e}")

        argv.extend(tokenize(command))
        argv.extend(extra_args)
        return CommandInvocation(
            argv=tuple(argv),
            env_overlay=env,
            timeout=self.config.timeout_seconds,
        )

    def run(self, invocation: CommandInvocation) -> CommandInvocation:
        """
        Run an invocation and return the completed copy.

        Raises:
            CommandTimeoutError: The process was killed after the timeout
            CommandSpawnError: The process could not be started
            CommandFailedError: The process exited non-zero
        """
        logger.debug(f"Executing BOSH command: {invocation.display}")
        env = os.environ.copy()
        env.update(invocation.env_overlay)

        try:
            process = subprocess.run(
                list(invocation.argv),
                capture_output=True,
                text=True,
                timeout=invocation.timeout,
                env=env,
            )
        except subprocess.TimeoutExpired as e:
            message = f"BOSH CLI command timed out after {invocation.timeout} seconds"
            logger.error(f"{message}: {invocation.display}")
            raise CommandTimeoutError(message, invocation.timeout) from e
        except OSError as e:
            logger.error(f"Failed to execute BOSH CLI command: {e}")
            raise CommandSpawnError(f"Failed to execute BOSH CLI command: {e}") from e

        completed = replace(
            invocation,
            stdout=process.stdout or "",
            stderr=process.stderr or "",
            exit_code=process.returncode,
        )

        if completed.exit_code != 0:
            diagnostic = completed.diagnostic
            logger.error(
                f"BOSH CLI command failed with exit code {completed.exit_code}: {diagnostic}"
            )
            raise CommandFailedError(
                f"BOSH CLI command failed: {diagnostic}",
                transient=classify_diagnostic(diagnostic),
                exit_code=completed.exit_code,
                output=diagnostic,
            )

        logger.debug(f"BOSH CLI command succeeded, output length: {len(completed.stdout.strip())}")
        return completed

    def execute(self, command: str, extra_args: Sequence[str] = ()) -> str:
        """Execute a logical command and return its trimmed stdout."""
        return self.run(self.build_invocation(command, extra_args)).stdout.strip()

    def execute_structured(self, command: str) -> Any:
        """
        Execute a logical command with ``--json`` and decode the output.

        Raises:
            OutputParseError: The process succeeded but its output is not JSON
        """
        output = self.execute(f"{command} {JSON_FLAG}")
        if not output:
            raise OutputParseError("BOSH CLI returned empty JSON output", output)
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON output: {output[:500]}")
            raise OutputParseError(f"Failed to parse BOSH CLI JSON output: {e}", output) from e

    def is_available(self) -> bool:
        """Best-effort ``--version`` probe. Never raises."""
        try:
            process = subprocess.run(
                [self.cli_path, "--version"],
                capture_output=True,
                text=True,
                timeout=AVAILABILITY_TIMEOUT_SECONDS,
            )
            return process.returncode == 0
        except Exception as e:
            logger.debug(f"BOSH CLI not available: {e}")
            return False

    def test_connection(self) -> bool:
        """Issue a lightweight listing against the director. Never raises."""
        try:
            self.execute_structured(CONNECTION_TEST_COMMAND)
            return True
        except Exception as e:
            logger.debug(f"BOSH Director connection test failed: {e}")
            return False
