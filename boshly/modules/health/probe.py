"""
Health probe for BOSH Director connectivity.

Each check repeats the CLI availability and director connectivity tests and
records when it last succeeded or failed.
"""

import logging
import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from boshly.modules.executor import CommandExecutor

logger = logging.getLogger("boshly.health.probe")


def _isoformat(timestamp: Optional[float]) -> Optional[str]:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


class HealthProbe:
    """Tracks BOSH Director health across checks."""

    def __init__(self, executor: CommandExecutor, clock: Callable[[], float] = time.time):
        self.executor = executor
        self._clock = clock
        self._lock = threading.Lock()
        self.last_success: Optional[float] = None
        self.last_failure: Optional[float] = None
        self.failure_count = 0

    def check(self) -> bool:
        """Run a health check. Never raises."""
        director = self.executor.config.director
        logger.debug(f"Performing BOSH Director health check for: {director}")

        try:
            if not self.executor.is_available():
                logger.warning("BOSH CLI is not available")
                healthy = False
            else:
                healthy = self.executor.test_connection()
        except Exception as e:
            logger.warning(f"BOSH Director health check failed: {e}")
            healthy = False

        with self._lock:
            now = self._clock()
            if healthy:
                self.last_success = now
                self.failure_count = 0
            else:
                self.last_failure = now
                self.failure_count += 1

        if healthy:
            logger.debug("BOSH Director health check successful")
        else:
            logger.warning(
                f"BOSH Director health check failed ({self.failure_count} consecutive)"
            )
        return healthy

    def time_since_last_success(self) -> Optional[timedelta]:
        """Time since the last successful check, or None if never successful."""
        if self.last_success is None:
            return None
        return timedelta(seconds=self._clock() - self.last_success)

    def is_healthy_recently(self, max_age: timedelta) -> bool:
        """Whether a check succeeded within ``max_age``."""
        elapsed = self.time_since_last_success()
        if elapsed is None:
            return False
        return elapsed <= max_age

    def health_info(self) -> Dict[str, Any]:
        """Run a check and summarize the tracked state."""
        healthy = self.check()
        return {
            "status": "UP" if healthy else "DOWN",
            "director": self.executor.config.director,
            "last_success": _isoformat(self.last_success),
            "last_failure": _isoformat(self.last_failure),
            "consecutive_failures": self.failure_count,
        }
