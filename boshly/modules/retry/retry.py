"""
Fixed-delay retry for bosh operations.

Attempts an operation up to ``max_retries`` times, waiting a fixed delay
between attempts, and only when the failure looks transient. Errors that carry
a TransientKind are classified by type; anything else falls back to the
message heuristics the CLI diagnostics need.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from boshly.modules.errors import (
    OutputParseError,
    RetryInterruptedError,
    ValidationError,
)

logger = logging.getLogger("boshly.retry")

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_DELAY_SECONDS = 2.0

TRANSIENT_MESSAGE_MARKERS = (
    "timeout",
    "connection",
    "network",
    "unavailable",
    "temporary",
    "retry",
)

# Never retried, whatever their message says
NON_RETRYABLE_ERRORS = (OutputParseError, RetryInterruptedError, ValidationError)


@dataclass(frozen=True)
class RetryAttempt:
    """A failed attempt inside one execute_with_retry call."""

    operation_name: str
    attempt: int
    max_attempts: int
    error: Exception
    delay: float


def is_retryable(error: Exception) -> bool:
    """Whether a failure is worth another attempt."""
    if isinstance(error, NON_RETRYABLE_ERRORS):
        return False
    if getattr(error, "transient", None) is not None:
        return True
    # ConnectionError covers refused/reset sockets, TimeoutError covers socket.timeout
    if isinstance(error, (ConnectionError, TimeoutError)):
        return True

    message = str(error)
    if not message:
        return False
    return any(marker in message for marker in TRANSIENT_MESSAGE_MARKERS)


class RetryPolicy:
    """Bounded, fixed-delay retry scoped to a single logical operation."""

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        sleep: Optional[Callable[[float], None]] = None,
        on_retry: Optional[Callable[[RetryAttempt], None]] = None,
    ):
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.max_retries = max_retries
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self._on_retry = on_retry
        self._interrupted = threading.Event()

    def interrupt(self) -> None:
        """
        Shutdown signal: abort any pending or future wait between attempts.

        Shared by every service holding this policy and stays set until
        clear_interrupt(). The app lifespan calls it on exit.
        """
        self._interrupted.set()

    def clear_interrupt(self) -> None:
        self._interrupted.clear()

    @property
    def interrupted(self) -> bool:
        return self._interrupted.is_set()

    def _wait(self, operation_name: str) -> None:
        if self._sleep is not None:
            self._sleep(self.delay_seconds)
            interrupted = self._interrupted.is_set()
        else:
            interrupted = self._interrupted.wait(self.delay_seconds)

        if interrupted:
            logger.warning(f"{operation_name} interrupted during retry")
            raise RetryInterruptedError(f"Interrupted during retry of {operation_name}")

    def execute_with_retry(self, operation: Callable[[], T], operation_name: str) -> T:
        """
        Run ``operation`` with retry on transient failures.

        The original error is re-raised unchanged when it is not retryable or
        when the last attempt fails.

        Raises:
            RetryInterruptedError: If interrupted while waiting between attempts
        """
        started = time.monotonic()
        for attempt in range(1, self.max_retries + 1):
            try:
                return operation()
            except Exception as e:
                if attempt == self.max_retries:
                    logger.error(
                        f"{operation_name} failed after {self.max_retries} attempts "
                        f"({time.monotonic() - started:.1f}s): {e}"
                    )
                    raise

                if not is_retryable(e):
                    logger.error(f"{operation_name} failed with non-retryable error: {e}")
                    raise

                record = RetryAttempt(
                    operation_name=operation_name,
                    attempt=attempt,
                    max_attempts=self.max_retries,
                    error=e,
                    delay=self.delay_seconds,
                )
                logger.warning(
                    f"{operation_name} failed (attempt {attempt}/{self.max_retries}), "
                    f"retrying in {self.delay_seconds}s: {e}"
                )
                if self._on_retry is not None:
                    self._on_retry(record)
                self._wait(operation_name)

        raise RuntimeError(f"All retry attempts failed for: {operation_name}")
