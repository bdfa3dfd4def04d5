"""Startup validation of the resolved BOSH configuration."""

import logging
from typing import List

from boshly.modules.config import EffectiveConfig
from boshly.modules.errors import ConfigurationError
from boshly.modules.executor import CommandExecutor

logger = logging.getLogger("boshly.health.validator")


class ConfigValidator:
    """Fails startup when mandatory configuration is missing."""

    def __init__(self, config: EffectiveConfig, executor: CommandExecutor):
        self.config = config
        self.executor = executor

    def collect_errors(self) -> List[str]:
        """Check mandatory fields and CLI availability, returning error messages."""
        errors = []

        if not self.config.director.strip():
            errors.append(
                "BOSH Director is not configured. Set BOSH_DIRECTOR or "
                "BOSH_ENVIRONMENT in the secret folder."
            )
        if not self.config.client.strip():
            errors.append("BOSH client is not configured. Set BOSH_CLIENT.")
        if not self.config.client_secret.strip():
            errors.append("BOSH client secret is not configured. Set BOSH_CLIENT_SECRET.")

        if not self.config.has_ca_cert:
            logger.warning(
                "BOSH CA certificate is not configured. "
                "Set BOSH_CA_CERT or BOSH_CA_CERT_PATH."
            )

        if not self.executor.is_available():
            errors.append(
                "BOSH CLI is not available. Please ensure BOSH CLI is installed and in PATH."
            )

        for error in errors:
            logger.error(error)
        return errors

    def validate(self) -> None:
        """
        Validate configuration, then test connectivity.

        Raises:
            ConfigurationError: If any mandatory check failed
        """
        logger.info("Validating BOSH configuration...")

        errors = self.collect_errors()
        if errors:
            raise ConfigurationError(
                "BOSH configuration is incomplete: " + " ".join(errors)
            )

        logger.info("Testing BOSH Director connectivity...")
        if self.executor.test_connection():
            logger.info("BOSH Director connectivity test passed.")
        else:
            logger.warning(
                "BOSH Director connectivity test failed. "
                "The server will start but operations may fail."
            )

        logger.info(
            f"BOSH configuration validation passed. "
            f"Director: {self.config.director}, Client: {self.config.client}"
        )
