"""
BOSH CLI installer.

Makes sure a usable ``bosh`` binary exists when the application starts:

1. a non-default configured path that exists and is executable
2. ``bosh`` on the system PATH
3. a previously installed binary in the install directory
4. a pinned release downloaded from GitHub

Installer failures never block startup. The installer falls back to the bare
``bosh`` name and the first real command reports the problem instead.
"""

import logging
import os
import platform
import stat
import subprocess
import threading
from enum import Enum
from pathlib import Path
from typing import Optional

import requests

from boshly.config.provider import DEFAULT_CLI_PATH, InstallerSettings
from boshly.modules.errors import InstallerError

logger = logging.getLogger("boshly.installer")

BOSH_CLI_VERSION = "7.9.5"
BOSH_CLI_DOWNLOAD_URL = (
    "https://github.com/cloudfoundry/bosh-cli/releases/download/"
    "v{version}/bosh-cli-{version}-{os}-{arch}{ext}"
)

PROBE_TIMEOUT_SECONDS = 5
CONNECT_TIMEOUT_SECONDS = 30
READ_TIMEOUT_SECONDS = 60
CHUNK_SIZE = 8192


class InstallState(str, Enum):
    """Installer progress. Everything but NOT_CHECKED and DOWNLOADING is terminal."""

    NOT_CHECKED = "not_checked"
    USING_CONFIGURED_PATH = "using_configured_path"
    FOUND_IN_PATH = "found_in_path"
    DOWNLOADING = "downloading"
    INSTALLED = "installed"
    FALLBACK_UNRESOLVED = "fallback_unresolved"

    @property
    def is_terminal(self) -> bool:
        return self not in (InstallState.NOT_CHECKED, InstallState.DOWNLOADING)


def download_url(version: str = BOSH_CLI_VERSION) -> str:
    """Release asset URL for the current platform."""
    system = platform.system().lower()
    os_name = {"darwin": "darwin", "windows": "windows"}.get(system, "linux")

    machine = platform.machine().lower()
    arch = "arm64" if machine in ("arm64", "aarch64") else "amd64"

    ext = ".exe" if os_name == "windows" else ""
    return BOSH_CLI_DOWNLOAD_URL.format(version=version, os=os_name, arch=arch, ext=ext)


def is_executable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def probe_version(binary: str, timeout: float = PROBE_TIMEOUT_SECONDS) -> bool:
    """Run ``<binary> --version`` and report whether it exited cleanly."""
    try:
        process = subprocess.run(
            [binary, "--version"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.debug(f"{binary} --version timed out after {timeout}s")
        return False
    except OSError as e:
        logger.debug(f"{binary} not runnable: {e}")
        return False
    return process.returncode == 0


class BoshCliInstaller:
    """Resolves the bosh binary once per process and publishes its path."""

    def __init__(self, settings: InstallerSettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
        self._state = InstallState.NOT_CHECKED
        self._resolved_cli_path: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> InstallState:
        return self._state

    @property
    def binary_name(self) -> str:
        return "bosh.exe" if platform.system().lower() == "windows" else "bosh"

    @property
    def resolved_cli_path(self) -> str:
        """Resolved binary, or the configured path before resolution."""
        return self._resolved_cli_path or self.settings.cli_path

    def install(self) -> str:
        """
        Resolve the bosh binary. Runs at most once; later calls return the
        path published by the first one.
        """
        with self._lock:
            if self._state.is_terminal:
                return self._resolved_cli_path

            logger.info("Starting BOSH CLI installation check")
            state, path = self._resolve()
            self._resolved_cli_path = path
            self._state = state
            logger.info(f"BOSH CLI resolved to {path} ({state.value})")
            return path

    def _resolve(self):
        configured = self.settings.cli_path
        if configured and configured != DEFAULT_CLI_PATH:
            if is_executable_file(Path(configured)):
                logger.info(f"Using configured BOSH CLI at: {configured}")
                return InstallState.USING_CONFIGURED_PATH, configured
            logger.warning(f"Configured BOSH CLI {configured} is missing or not executable")

        if probe_version(DEFAULT_CLI_PATH):
            logger.info("BOSH CLI found in PATH")
            return InstallState.FOUND_IN_PATH, DEFAULT_CLI_PATH

        if not self.settings.enabled:
            logger.warning(
                "BOSH CLI not found and installation is disabled. "
                "Set BOSH_CLI_INSTALL_ENABLED=true to enable auto-installation."
            )
            return InstallState.FALLBACK_UNRESOLVED, DEFAULT_CLI_PATH

        try:
            return InstallState.INSTALLED, self._install_into_directory()
        except Exception as e:
            logger.error(f"Failed to install BOSH CLI: {e}", exc_info=True)
            logger.warning(
                "Falling back to 'bosh' command in PATH. "
                "Operations may fail if BOSH CLI is not available."
            )
            return InstallState.FALLBACK_UNRESOLVED, DEFAULT_CLI_PATH

    def _install_into_directory(self) -> str:
        install_dir = Path(self.settings.install_path)
        cli_binary = install_dir / self.binary_name

        if not install_dir.exists():
            install_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created BOSH CLI installation directory: {install_dir}")

        if is_executable_file(cli_binary):
            logger.info(f"BOSH CLI already installed at: {cli_binary}")
            return str(cli_binary)

        self._state = InstallState.DOWNLOADING
        logger.info(f"Installing BOSH CLI v{BOSH_CLI_VERSION} to: {cli_binary}")
        self._download(cli_binary)
        make_executable(cli_binary)
        logger.info(f"BOSH CLI successfully installed at: {cli_binary}")
        return str(cli_binary)

    def _download(self, target: Path) -> None:
        url = download_url()
        partial = target.with_name(target.name + ".part")
        logger.info(f"Downloading BOSH CLI from: {url}")

        try:
            with self.session.get(
                url,
                stream=True,
                timeout=(CONNECT_TIMEOUT_SECONDS, READ_TIMEOUT_SECONDS),
            ) as response:
                response.raise_for_status()
                total_bytes = 0
                with open(partial, "wb") as handle:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            handle.write(chunk)
                            total_bytes += len(chunk)
        except (requests.RequestException, OSError) as e:
            partial.unlink(missing_ok=True)
            raise InstallerError(f"Failed to download BOSH CLI from {url}: {e}") from e

        if total_bytes == 0:
            partial.unlink(missing_ok=True)
            raise InstallerError(f"Downloaded BOSH CLI from {url} is empty")

        os.replace(partial, target)
        logger.info(f"Downloaded BOSH CLI: {total_bytes} bytes")


def make_executable(path: Path) -> None:
    """Grant read+execute to everyone (rwxr-xr-x), best effort off POSIX."""
    try:
        os.chmod(path, 0o755)
        logger.debug("Set executable permissions on BOSH CLI binary")
        return
    except (OSError, NotImplementedError) as e:
        logger.debug(f"POSIX permissions not supported for {path}: {e}")

    try:
        os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR)
        logger.debug("Set executable permissions on BOSH CLI binary (non-POSIX)")
    except OSError as e:
        logger.warning(f"Could not set executable permissions on BOSH CLI binary: {e}")
