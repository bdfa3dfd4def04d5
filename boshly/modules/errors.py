"""
Error taxonomy shared by all Boshly modules.

Every failure raised out of the executor, resolver and retry policy is a
BoshError. Transient failures carry a TransientKind so the retry policy can
classify them without parsing message text.
"""

from enum import Enum
from typing import Optional


class TransientKind(str, Enum):
    """Categories of failures that are likely to succeed on retry."""

    TIMEOUT = "timeout"
    CONNECTION_REFUSED = "connection_refused"
    DNS_FAILURE = "dns_failure"
    SPAWN_FAILURE = "spawn_failure"


class BoshError(Exception):
    """Base class for Boshly errors."""

    def __init__(self, message: str, transient: Optional[TransientKind] = None):
        super().__init__(message)
        self.message = message
        self.transient = transient


class ConfigurationError(BoshError):
    """Configuration is incomplete or could not be materialized."""


class InstallerError(BoshError):
    """The bosh CLI could not be installed."""


class CommandError(BoshError):
    """A bosh CLI invocation did not complete successfully."""

    def __init__(
        self,
        message: str,
        transient: Optional[TransientKind] = None,
        exit_code: Optional[int] = None,
        output: str = "",
    ):
        super().__init__(message, transient)
        self.exit_code = exit_code
        self.output = output


class CommandTimeoutError(CommandError):
    """The child process did not exit within the configured timeout."""

    def __init__(self, message: str, timeout: float):
        super().__init__(message, TransientKind.TIMEOUT, exit_code=-1)
        self.timeout = timeout


class CommandSpawnError(CommandError):
    """The child process could not be started."""

    def __init__(self, message: str):
        super().__init__(message, TransientKind.SPAWN_FAILURE, exit_code=-1)


class CommandFailedError(CommandError):
    """The child process exited with a non-zero status."""


class OutputParseError(BoshError):
    """Structured output from a successful process could not be decoded."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class RetryInterruptedError(BoshError):
    """A retry loop was interrupted while waiting between attempts."""


class ValidationError(BoshError, ValueError):
    """A caller supplied a blank required parameter."""
