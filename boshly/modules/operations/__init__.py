"""
Operations Module - Black Box Interface

Purpose: BOSH domain operations (deployments, VMs, logs, errands, releases,
stemcells, cloud config, SSH)
Interface: build_services() -> BoshServices
Hidden: Command strings, parameter validation, JSON table handling

Every operation validates its parameters, then calls the executor through the
retry policy.
"""

from dataclasses import dataclass

from boshly.modules.executor import CommandExecutor
from boshly.modules.retry import RetryPolicy

from .base import BoshService, iter_table_rows, require, require_name, require_path
from .cloud_config import CloudConfigService
from .deployments import DeploymentService
from .errands import ErrandService
from .logs import LogService
from .releases import ReleaseService, StemcellService
from .ssh import SshService
from .vms import VmService


@dataclass(frozen=True)
class BoshServices:
    """All domain services sharing one executor and retry policy."""

    deployments: DeploymentService
    vms: VmService
    logs: LogService
    errands: ErrandService
    releases: ReleaseService
    stemcells: StemcellService
    cloud_config: CloudConfigService
    ssh: SshService


def build_services(executor: CommandExecutor, retry_policy: RetryPolicy) -> BoshServices:
    """Create every domain service."""
    return BoshServices(
        deployments=DeploymentService(executor, retry_policy),
        vms=VmService(executor, retry_policy),
        logs=LogService(executor, retry_policy),
        errands=ErrandService(executor, retry_policy),
        releases=ReleaseService(executor, retry_policy),
        stemcells=StemcellService(executor, retry_policy),
        cloud_config=CloudConfigService(executor, retry_policy),
        ssh=SshService(executor, retry_policy),
    )


__all__ = [
    "BoshService",
    "BoshServices",
    "CloudConfigService",
    "DeploymentService",
    "ErrandService",
    "LogService",
    "ReleaseService",
    "SshService",
    "StemcellService",
    "VmService",
    "build_services",
    "iter_table_rows",
    "require",
    "require_name",
    "require_path",
]
