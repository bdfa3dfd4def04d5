"""Shared plumbing for BOSH domain operations."""

import logging
from typing import Any, Callable, Dict, Iterator, Optional, Sequence, TypeVar

from boshly.modules.errors import ValidationError
from boshly.modules.executor import CommandExecutor
from boshly.modules.retry import RetryPolicy

logger = logging.getLogger("boshly.operations")

T = TypeVar("T")


def has_text(value: Optional[str]) -> bool:
    return value is not None and str(value).strip() != ""


def require(value: Optional[str], label: str) -> str:
    """Reject blank required parameters before any process is spawned."""
    if not has_text(value):
        raise ValidationError(f"{label} is required")
    return str(value).strip()


def require_name(value: Optional[str], label: str) -> str:
    """
    Required identifier that becomes one token of the command line.

    Names, versions and IDs are spliced into the command, so whitespace would
    split them into extra arguments and a leading ``-`` would read as a flag.
    """
    value = require(value, label)
    if any(ch.isspace() for ch in value):
        raise ValidationError(f"{label} must not contain whitespace")
    if value.startswith("-"):
        raise ValidationError(f"{label} must not start with '-'")
    return value


def optional_name(value: Optional[str], label: str) -> Optional[str]:
    """Like require_name, but blank means absent."""
    if not has_text(value):
        return None
    return require_name(value, label)


def require_path(value: Optional[str], label: str) -> str:
    """
    Required file path or URL, passed to bosh as a single argument.

    Whitespace is allowed since the value is never tokenized.
    """
    value = require(value, label)
    if value.startswith("-"):
        raise ValidationError(f"{label} must not start with '-'")
    return value


def instance_target(instance_group: str, instance_id: Optional[str] = None) -> str:
    """``group`` or ``group/id``."""
    instance_id = optional_name(instance_id, "Instance ID")
    if instance_id:
        return f"{instance_group}/{instance_id}"
    return instance_group


def iter_table_rows(result: Any) -> Iterator[Dict[str, Any]]:
    """Yield rows from the ``Tables[].Rows[]`` layout of ``bosh --json`` output."""
    if not isinstance(result, dict):
        return
    for table in result.get("Tables") or []:
        for row in (table or {}).get("Rows") or []:
            if isinstance(row, dict):
                yield row


class BoshService:
    """Base class for services that call the bosh CLI with retry."""

    def __init__(self, executor: CommandExecutor, retry_policy: RetryPolicy):
        self.executor = executor
        self.retry_policy = retry_policy

    def _with_retry(self, operation: Callable[[], T], operation_name: str) -> T:
        return self.retry_policy.execute_with_retry(operation, operation_name)

    def _structured(self, command: str, operation_name: str) -> Any:
        return self._with_retry(lambda: self.executor.execute_structured(command), operation_name)

    def _raw(self, command: str, operation_name: str, extra_args: Sequence[str] = ()) -> str:
        return self._with_retry(
            lambda: self.executor.execute(command, extra_args), operation_name
        )
