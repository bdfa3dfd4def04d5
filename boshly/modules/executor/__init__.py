"""
Executor Module - Black Box Interface

Purpose: Run bosh CLI commands with injected credentials
Interface: CommandExecutor.execute(), execute_structured(), is_available(), test_connection()
Hidden: argv construction, child environment, timeout handling, JSON decoding

One process per call, no retries. Wrap calls in a RetryPolicy for resilience.
"""

from .command_executor import (
    CommandExecutor,
    CommandInvocation,
    classify_diagnostic,
    tokenize,
)

__all__ = ["CommandExecutor", "CommandInvocation", "classify_diagnostic", "tokenize"]
