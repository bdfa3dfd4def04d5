"""
Shared pytest fixtures for Boshly tests.

This module provides common fixtures including:
- BoshMocker: Mock bosh subprocess calls with canned responses
- Config factories for EffectiveConfig and the settings dataclasses
- A RetryPolicy that records sleeps instead of waiting
"""

import json
import os
import subprocess
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Union
from unittest.mock import MagicMock, patch

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from boshly.config.provider import (  # noqa: E402
    APIConfig,
    BoshSettings,
    InstallerSettings,
    RetrySettings,
)
from boshly.modules.config import EffectiveConfig  # noqa: E402
from boshly.modules.executor import CommandExecutor  # noqa: E402
from boshly.modules.retry import RetryPolicy  # noqa: E402


# =============================================================================
# Bosh Mocking Infrastructure
# =============================================================================

@dataclass
class BoshResponse:
    """Represents a mocked bosh command response."""
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0
    raises: Optional[BaseException] = None

    def to_completed_process(self) -> MagicMock:
        """Convert to a subprocess.CompletedProcess-like mock."""
        if self.raises is not None:
            raise self.raises
        result = MagicMock()
        result.stdout = self.stdout
        result.stderr = self.stderr
        result.returncode = self.returncode
        return result


@dataclass
class BoshCall:
    """Record of a bosh call made during testing."""
    command: List[str]
    full_command_str: str
    env: Optional[Dict[str, str]] = None
    timeout: Optional[float] = None
    matched_pattern: Optional[str] = None


class BoshMocker:
    """
    Mock bosh subprocess calls with pattern-matched responses.

    Any command whose binary is named ``bosh`` is intercepted; everything else
    is rejected so a test can never spawn a real process.

    Usage:
        def test_list(bosh_mocker, executor):
            bosh_mocker.register("deployments --json", BoshResponse(stdout="{}"))
            executor.execute_structured("deployments")
            assert bosh_mocker.was_called_with("deployments --json")

    Registering the same pattern several times queues the responses; the last
    one keeps answering once the queue is drained.
    """

    def __init__(self):
        self._responses: List[tuple] = []
        self._call_history: List[BoshCall] = []
        self._default_response = BoshResponse(
            stderr="Error: mock not configured for this command",
            returncode=1
        )

    def register(
        self,
        pattern: Union[str, Pattern],
        *responses: BoshResponse,
        priority: int = 0
    ) -> "BoshMocker":
        """
        Register responses for commands matching the pattern.

        Args:
            pattern: String (substring match) or regex pattern
            responses: One or more BoshResponse, answered in order
            priority: Higher priority patterns are checked first

        Returns:
            self for chaining
        """
        self._responses.append((pattern, list(responses), priority))
        # Sort by priority (highest first)
        self._responses.sort(key=lambda x: x[2], reverse=True)
        return self

    def set_default_response(self, response: BoshResponse) -> "BoshMocker":
        """Set the default response for unmatched commands."""
        self._default_response = response
        return self

    def mock_run(
        self,
        cmd: List[str],
        capture_output: bool = True,
        text: bool = True,
        timeout: Optional[float] = None,
        env: Optional[Dict[str, str]] = None,
        **kwargs
    ) -> MagicMock:
        """
        Mock implementation of subprocess.run for bosh commands.

        This method is used as a side_effect for patching subprocess.run.
        """
        cmd_str = " ".join(cmd)
        if os.path.basename(cmd[0]) not in ("bosh", "bosh.exe"):
            raise RuntimeError(f"Non-bosh command blocked: {cmd_str}")

        bosh_args = " ".join(cmd[1:])
        matched_pattern = None
        response = self._default_response

        for pattern, queue, _ in self._responses:
            if isinstance(pattern, str):
                matched = pattern in bosh_args
            else:  # Compiled regex
                matched = pattern.search(bosh_args) is not None
            if matched:
                matched_pattern = pattern if isinstance(pattern, str) else pattern.pattern
                response = queue.pop(0) if len(queue) > 1 else queue[0]
                break

        self._call_history.append(BoshCall(
            command=list(cmd),
            full_command_str=cmd_str,
            env=env,
            timeout=timeout,
            matched_pattern=matched_pattern,
        ))

        return response.to_completed_process()

    @property
    def calls(self) -> List[BoshCall]:
        """Get all bosh calls made during the test."""
        return self._call_history

    @property
    def call_count(self) -> int:
        """Get the number of bosh calls made."""
        return len(self._call_history)

    @property
    def last_call(self) -> BoshCall:
        return self._call_history[-1]

    def was_called_with(self, pattern: str) -> bool:
        """Check if any call contained the given pattern."""
        return any(pattern in call.full_command_str for call in self._call_history)

    def reset(self):
        """Clear call history (but keep registered responses)."""
        self._call_history = []


@pytest.fixture
def bosh_mocker():
    """
    Fixture that provides a BoshMocker with subprocess.run patched.

    Usage:
        def test_something(bosh_mocker):
            bosh_mocker.register("vms", BoshResponse(stdout="..."))
            # Your test code that calls bosh
            assert bosh_mocker.was_called_with("vms")
    """
    mocker = BoshMocker()
    with patch("subprocess.run", side_effect=mocker.mock_run):
        yield mocker


def timeout_response(seconds: float = 60) -> BoshResponse:
    """Response that behaves like a child killed after ``seconds``."""
    return BoshResponse(raises=subprocess.TimeoutExpired(cmd="bosh", timeout=seconds))


def json_table(*rows: dict) -> str:
    """Minimal ``bosh --json`` document with a single table."""
    return json.dumps({"Tables": [{"Content": "", "Rows": list(rows)}]})


# =============================================================================
# Configuration Fixtures
# =============================================================================

def make_config(**overrides) -> EffectiveConfig:
    values = dict(
        director="https://10.0.0.6:25555",
        client="admin",
        client_secret="s3cret",
        ca_cert_path=None,
        cli_path="bosh",
        timeout_seconds=60,
    )
    values.update(overrides)
    return EffectiveConfig(**values)


def make_settings(**overrides) -> BoshSettings:
    values = dict(
        director="",
        client="",
        client_secret="",
        ca_cert="",
        ca_cert_path="",
        cli_path="bosh",
        timeout_seconds=60,
        env_dir=".env-does-not-exist",
    )
    values.update(overrides)
    return BoshSettings(**values)


class FakeConfigProvider:
    """ConfigProvider returning fixed settings."""

    def __init__(self, bosh: BoshSettings, install_path: str, enabled: bool = False):
        self.bosh = bosh
        self.install_path = install_path
        self.enabled = enabled

    def get_bosh_settings(self) -> BoshSettings:
        return self.bosh

    def get_retry_settings(self) -> RetrySettings:
        return RetrySettings(max_attempts=3, delay_seconds=0)

    def get_installer_settings(self) -> InstallerSettings:
        return InstallerSettings(
            enabled=self.enabled,
            install_path=self.install_path,
            cli_path=self.bosh.cli_path,
        )

    def get_api_config(self) -> APIConfig:
        return APIConfig(port=8080, host="127.0.0.1", debug=False, log_level="INFO")


@pytest.fixture
def config() -> EffectiveConfig:
    return make_config()


@pytest.fixture
def executor(config) -> CommandExecutor:
    return CommandExecutor(config)


@pytest.fixture
def sleeps() -> List[float]:
    """Delays requested by the retry policy fixture."""
    return []


@pytest.fixture
def retry_policy(sleeps) -> RetryPolicy:
    """Three attempts, no real waiting."""
    return RetryPolicy(max_retries=3, delay_seconds=2, sleep=sleeps.append)


@pytest.fixture
def clean_bosh_env(monkeypatch):
    """Remove every variable the env provider reads."""
    for name in list(os.environ):
        if name.startswith("BOSH_") or name in ("API_HOST", "API_PORT", "API_DEBUG", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
    return monkeypatch


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "bosh_mock: Tests using mocked bosh subprocess calls"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring a BOSH Director"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
