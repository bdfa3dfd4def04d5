"""
Installer Module - Black Box Interface

Purpose: Make a bosh CLI binary available at startup
Interface: BoshCliInstaller.install(), BoshCliInstaller.resolved_cli_path
Hidden: PATH probing, release download, permission handling

Never blocks startup: failures degrade to the bare ``bosh`` command.
"""

from .installer import (
    BOSH_CLI_VERSION,
    BoshCliInstaller,
    InstallState,
    download_url,
    make_executable,
    probe_version,
)

__all__ = [
    "BOSH_CLI_VERSION",
    "BoshCliInstaller",
    "InstallState",
    "download_url",
    "make_executable",
    "probe_version",
]
