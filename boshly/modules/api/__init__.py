"""
API Module - Black Box Interface

Purpose: HTTP payload models
Interface: HealthResponse, HealthStatus
"""

from .models import HealthResponse, HealthStatus

__all__ = ["HealthResponse", "HealthStatus"]
