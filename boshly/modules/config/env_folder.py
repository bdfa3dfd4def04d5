"""
Secret folder reader.

Reads fallback BOSH credentials from a local folder (``.env`` by default):

- ``bosh-env.ini``: shell export lines (``export KEY=value``, quoted values allowed)
- ``bosh.pem``: raw PEM certificate content

The folder is loaded lazily and at most once per reader.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger("boshly.config.env_folder")

ENV_INI_FILE = "bosh-env.ini"
CERT_FILE = "bosh.pem"


def parse_export_lines(text: str) -> Dict[str, str]:
    """
    Parse ``export KEY=value`` lines into a dictionary.

    Blank lines and ``#`` comments are skipped, as is anything that is not an
    export statement. Matching single or double quotes around a value are
    stripped.
    """
    values: Dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if not line.startswith("export "):
            continue

        content = line[len("export "):].strip()
        key, sep, value = content.partition("=")
        key = key.strip()
        if not sep or not key:
            continue

        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        values[key] = value
    return values


class SecretFolderReader:
    """Lazy, once-only reader for the local secret folder."""

    def __init__(self, env_dir: str = ".env"):
        self.env_dir = Path(env_dir)
        self._config: Dict[str, str] = {}
        self._certificate: Optional[str] = None
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def env_ini_path(self) -> Path:
        return self.env_dir / ENV_INI_FILE

    @property
    def cert_path(self) -> Path:
        return self.env_dir / CERT_FILE

    def initialize(self) -> None:
        """Load the folder contents. Safe to call repeatedly."""
        with self._lock:
            if self._initialized:
                return

            logger.info(f"Reading BOSH configuration from {self.env_dir}")

            if self.env_ini_path.is_file():
                self._read_env_ini()
            else:
                logger.debug(f"{self.env_ini_path} not found, skipping")

            if self.cert_path.is_file():
                self._certificate = self._read_certificate(self.cert_path)
            else:
                logger.debug(f"{self.cert_path} not found, skipping")

            self._initialized = True

    def _read_env_ini(self) -> None:
        try:
            text = self.env_ini_path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to read {self.env_ini_path}: {e}")
            return

        self._config = parse_export_lines(text)
        for key, value in self._config.items():
            shown = "***" if "SECRET" in key else value
            logger.debug(f"Loaded config: {key} = {shown}")

    def _read_certificate(self, path: Path) -> Optional[str]:
        try:
            content = path.read_text(encoding="utf-8").strip()
        except OSError as e:
            logger.warning(f"Failed to read certificate {path}: {e}")
            return None
        logger.info(f"Certificate loaded from {path} ({len(content)} bytes)")
        return content

    def get(self, key: str) -> Optional[str]:
        """Get a raw value from bosh-env.ini."""
        self.initialize()
        return self._config.get(key)

    def get_director(self) -> Optional[str]:
        return self.get("BOSH_ENVIRONMENT")

    def get_client(self) -> Optional[str]:
        return self.get("BOSH_CLIENT")

    def get_client_secret(self) -> Optional[str]:
        return self.get("BOSH_CLIENT_SECRET")

    def get_certificate_content(self) -> Optional[str]:
        """Content of the bundled bosh.pem, if it was present."""
        self.initialize()
        return self._certificate or None

    def get_certificate_pointer(self) -> Optional[str]:
        """
        Resolve the BOSH_CA_CERT entry of bosh-env.ini.

        The entry is honoured only when it names the bundled ``bosh.pem``
        (bare or as a path suffix); the bundled file content is returned.
        """
        pointer = self.get("BOSH_CA_CERT")
        if not pointer:
            return None
        if pointer != CERT_FILE and not pointer.endswith("/" + CERT_FILE):
            return None
        if not self.cert_path.is_file():
            return None
        return self._read_certificate(self.cert_path)

    def is_available(self) -> bool:
        """Whether the folder holds a bosh-env.ini file."""
        return self.env_ini_path.is_file()
