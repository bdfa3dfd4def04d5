"""
Retry Module - Black Box Interface

Purpose: Retry transient bosh failures a bounded number of times
Interface: RetryPolicy.execute_with_retry(), RetryPolicy.interrupt(), is_retryable()
Hidden: Transient classification, inter-attempt waiting

Fixed delay, no backoff. Parse, validation and interruption errors are never retried.
"""

from .retry import (
    DEFAULT_DELAY_SECONDS,
    DEFAULT_MAX_RETRIES,
    RetryAttempt,
    RetryPolicy,
    is_retryable,
)

__all__ = [
    "DEFAULT_DELAY_SECONDS",
    "DEFAULT_MAX_RETRIES",
    "RetryAttempt",
    "RetryPolicy",
    "is_retryable",
]
