"""
Logging setup shared by uvicorn and the Boshly modules.

Application loggers live under ``boshly.*`` and follow the configured level.
The MCP stack (``fastmcp``, ``mcp``) stays at WARNING unless debugging, since
it logs every session and request. Polling of the health routes is kept
out of the access log.
"""

import logging
import logging.config
from typing import Any, Dict, Iterable, Optional

HEALTH_PATHS = ("/health", "/healthz")
APP_LOGGER = "boshly"
MCP_LOGGERS = ("fastmcp", "mcp")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class HealthCheckFilter(logging.Filter):
    """Drop uvicorn access records for GET requests on the given paths."""

    def __init__(self, paths: Optional[Iterable[str]] = None):
        super().__init__()
        self.paths = frozenset(paths or HEALTH_PATHS)

    def _request(self, record: logging.LogRecord):
        # uvicorn passes (client, method, path, http_version, status)
        if isinstance(record.args, tuple) and len(record.args) >= 3:
            return str(record.args[1]), str(record.args[2])
        parts = record.getMessage().split('"')
        if len(parts) > 1:
            request = parts[1].split()
            if len(request) >= 2:
                return request[0], request[1]
        return None, None

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True
        method, path = self._request(record)
        if method != "GET" or path is None:
            return True
        return path.split("?", 1)[0] not in self.paths


def _logger(handler: str, level: str) -> Dict[str, Any]:
    return {"handlers": [handler], "level": level, "propagate": False}


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """dictConfig mapping for ``level``, also handed to uvicorn as ``log_config``."""
    level = level.upper()
    mcp_level = "DEBUG" if level == "DEBUG" else "WARNING"

    loggers = {
        "uvicorn": _logger("console", "INFO"),
        "uvicorn.error": _logger("console", "INFO"),
        "uvicorn.access": _logger("access", "INFO"),
        APP_LOGGER: _logger("console", level),
    }
    for name in MCP_LOGGERS:
        loggers[name] = _logger("console", mcp_level)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "skip_health": {"()": HealthCheckFilter, "paths": list(HEALTH_PATHS)},
        },
        "formatters": {
            "console": {"format": LOG_FORMAT},
            "access": {"format": "%(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "console",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["skip_health"],
            },
        },
        "loggers": loggers,
        "root": {"level": "WARNING", "handlers": ["console"]},
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
