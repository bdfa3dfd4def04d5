"""
Boshly HTTP data models.

These models define the payloads served by the HTTP surface next to the MCP
endpoint.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    """Director health as reported by the probe."""

    UP = "UP"
    DOWN = "DOWN"


class HealthResponse(BaseModel):
    """Response of the /health endpoint."""

    status: HealthStatus
    director: str = Field(..., description="BOSH Director URL")
    cli_path: str = Field(..., description="bosh binary used for commands")
    install_state: str = Field(..., description="Outcome of the CLI installer")
    last_success: Optional[str] = Field(None, description="ISO timestamp of the last success")
    last_failure: Optional[str] = Field(None, description="ISO timestamp of the last failure")
    consecutive_failures: int = Field(0, ge=0)
    version: str
