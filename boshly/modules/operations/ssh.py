"""SSH access to deployment VMs."""

import logging
from typing import Any, Optional

from .base import BoshService, instance_target, require, require_name

logger = logging.getLogger("boshly.operations.ssh")


class SshService(BoshService):

    def ssh_to_vm(
        self,
        deployment_name: str,
        instance_group: str,
        instance_id: Optional[str] = None,
    ) -> Any:
        """SSH connection information for a VM."""
        deployment_name = require_name(deployment_name, "Deployment name")
        instance_group = require_name(instance_group, "Instance group")
        target = instance_target(instance_group, instance_id)
        logger.info(f"Getting SSH info for VM: {target} in deployment: {deployment_name}")
        return self._structured(f"ssh -d {deployment_name} {target}", "sshToVm")

    def execute_command_on_vm(
        self,
        deployment_name: str,
        instance_group: str,
        command: str,
        instance_id: Optional[str] = None,
    ) -> str:
        deployment_name = require_name(deployment_name, "Deployment name")
        instance_group = require_name(instance_group, "Instance group")
        command = require(command, "Command")
        target = instance_target(instance_group, instance_id)
        logger.info(f"Executing command on VM: {target} in deployment: {deployment_name}")
        # The remote command must reach bosh as one argument
        return self._raw(
            f"ssh -d {deployment_name} {target}", "executeCommandOnVm", ["-c", command]
        )
