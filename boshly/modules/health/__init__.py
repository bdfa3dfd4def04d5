"""
Health Module - Black Box Interface

Purpose: Validate configuration at startup and track director health
Interface: ConfigValidator.validate(), HealthProbe.check(), HealthProbe.is_healthy_recently()
Hidden: Individual checks, timestamp bookkeeping
"""

from .probe import HealthProbe
from .validator import ConfigValidator

__all__ = ["ConfigValidator", "HealthProbe"]
