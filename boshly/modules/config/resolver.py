"""
Hierarchical configuration resolver.

Merges explicit settings with the secret folder into a single immutable
EffectiveConfig. Every field falls back independently: an explicit non-blank
value always wins, otherwise the secret-folder value is used.
"""

import atexit
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Optional, Tuple

from boshly.config.provider import BoshSettings
from boshly.modules.errors import ConfigurationError

from .env_folder import SecretFolderReader

logger = logging.getLogger("boshly.config.resolver")

CERT_TEMP_PREFIX = "bosh-ca-cert"
CERT_TEMP_SUFFIX = ".pem"


@dataclass(frozen=True)
class EffectiveConfig:
    """Resolved BOSH configuration, built once at startup."""

    director: str
    client: str
    client_secret: str
    ca_cert_path: Optional[str]
    cli_path: str
    timeout_seconds: int

    @property
    def has_ca_cert(self) -> bool:
        return bool(self.ca_cert_path)

    def describe(self) -> dict:
        """Loggable view of the configuration with the secret masked."""
        return {
            "director": self.director,
            "client": self.client,
            "client_secret": "***" if self.client_secret else "",
            "ca_cert_path": self.ca_cert_path,
            "cli_path": self.cli_path,
            "timeout_seconds": self.timeout_seconds,
        }


def _has_text(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def resolve_field(explicit: Optional[str], fallback: Optional[str]) -> str:
    """Explicit value if non-blank, else the fallback, else blank."""
    if _has_text(explicit):
        return explicit
    if _has_text(fallback):
        return fallback
    return ""


def _remove_file(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Failed to remove temporary CA certificate {path}: {e}")


def materialize_certificate(content: str) -> str:
    """
    Write certificate content to a new temporary file.

    The file is removed when the process exits. Each call creates a new file.

    Raises:
        ConfigurationError: If the file cannot be written
    """
    try:
        fd, path = tempfile.mkstemp(prefix=CERT_TEMP_PREFIX, suffix=CERT_TEMP_SUFFIX)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
    except OSError as e:
        logger.error(f"Failed to create temporary CA certificate file: {e}")
        raise ConfigurationError(
            f"Failed to create temporary CA certificate file: {e}"
        ) from e

    atexit.register(_remove_file, path)
    logger.info(f"Created temporary CA certificate file: {path} (size: {len(content)} bytes)")
    return path


class ConfigResolver:
    """Builds an EffectiveConfig from explicit settings and the secret folder."""

    def __init__(self, settings: BoshSettings, reader: Optional[SecretFolderReader] = None):
        self.settings = settings
        self.reader = reader or SecretFolderReader(settings.env_dir)

    def resolve(self) -> EffectiveConfig:
        """
        Resolve the effective configuration.

        Raises:
            ConfigurationError: If certificate content cannot be materialized
        """
        self.reader.initialize()

        director = resolve_field(self.settings.director, self.reader.get_director())
        client = resolve_field(self.settings.client, self.reader.get_client())
        client_secret = resolve_field(
            self.settings.client_secret, self.reader.get_client_secret()
        )

        content, path = self._resolve_certificate()
        if content is not None:
            path = materialize_certificate(content)

        config = EffectiveConfig(
            director=director,
            client=client,
            client_secret=client_secret,
            ca_cert_path=path,
            cli_path=self.settings.cli_path,
            timeout_seconds=self.settings.timeout_seconds,
        )
        logger.info(f"Resolved BOSH configuration: {config.describe()}")
        return config

    def _resolve_certificate(self) -> Tuple[Optional[str], Optional[str]]:
        """
        Pick the certificate source.

        Returns (content, None) when the winner is certificate content, or
        (None, path) when it is an explicit path. Inline content wins even if
        a path is also configured.
        """
        if _has_text(self.settings.ca_cert):
            if _has_text(self.settings.ca_cert_path):
                logger.info("Inline CA certificate overrides configured certificate path")
            return self.settings.ca_cert, None

        if _has_text(self.settings.ca_cert_path):
            logger.info(f"Using provided CA certificate path: {self.settings.ca_cert_path}")
            return None, self.settings.ca_cert_path

        folder_content = self.reader.get_certificate_content()
        if _has_text(folder_content):
            return folder_content, None

        pointed_content = self.reader.get_certificate_pointer()
        if _has_text(pointed_content):
            return pointed_content, None

        logger.warning("No CA certificate configured (neither content nor path provided)")
        return None, None
