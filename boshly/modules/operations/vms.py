"""VM operations within a deployment."""

import logging
from typing import Any, Optional

from .base import BoshService, instance_target, require_name

logger = logging.getLogger("boshly.operations.vms")


class VmService(BoshService):
    """Inspect and control the VMs of a deployment."""

    def list_vms(self, deployment_name: str) -> Any:
        deployment_name = require_name(deployment_name, "Deployment name")
        logger.info(f"Listing VMs for deployment: {deployment_name}")
        return self._structured(f"vms -d {deployment_name}", "listVms")

    def get_vm_status(self, deployment_name: str) -> Any:
        deployment_name = require_name(deployment_name, "Deployment name")
        logger.info(f"Getting VM status for deployment: {deployment_name}")
        return self._structured(f"vms -d {deployment_name} --details", "getVmStatus")

    def _instance_action(
        self,
        verb: str,
        operation_name: str,
        deployment_name: str,
        instance_group: str,
        instance_id: Optional[str],
    ) -> str:
        deployment_name = require_name(deployment_name, "Deployment name")
        instance_group = require_name(instance_group, "Instance group")
        target = instance_target(instance_group, instance_id)
        logger.info(f"{verb.capitalize()} VM: {target} in deployment: {deployment_name}")
        output = self._raw(f"{verb} -d {deployment_name} {target}", operation_name)
        logger.info(f"{verb.capitalize()} of VM {target} completed")
        return output

    def start_vm(self, deployment_name: str, instance_group: str,
                 instance_id: Optional[str] = None) -> str:
        return self._instance_action("start", "startVm", deployment_name, instance_group, instance_id)

    def stop_vm(self, deployment_name: str, instance_group: str,
                instance_id: Optional[str] = None) -> str:
        return self._instance_action("stop", "stopVm", deployment_name, instance_group, instance_id)

    def restart_vm(self, deployment_name: str, instance_group: str,
                   instance_id: Optional[str] = None) -> str:
        return self._instance_action(
            "restart", "restartVm", deployment_name, instance_group, instance_id
        )

    def recreate_vm(self, deployment_name: str, instance_group: str,
                    instance_id: Optional[str] = None) -> str:
        return self._instance_action(
            "recreate", "recreateVm", deployment_name, instance_group, instance_id
        )
