"""Log retrieval for deployments, VMs and tasks."""

import logging
from typing import Optional

from .base import BoshService, instance_target, optional_name, require_name

logger = logging.getLogger("boshly.operations.logs")


class LogService(BoshService):

    def get_deployment_logs(
        self,
        deployment_name: str,
        instance_group: Optional[str] = None,
        instance_id: Optional[str] = None,
    ) -> str:
        deployment_name = require_name(deployment_name, "Deployment name")
        command = f"logs -d {deployment_name}"
        instance_group = optional_name(instance_group, "Instance group")
        if instance_group:
            command += " " + instance_target(instance_group, instance_id)
        logger.info(f"Getting logs for deployment: {deployment_name}")
        return self._raw(command, "getDeploymentLogs")

    def get_vm_logs(
        self,
        deployment_name: str,
        instance_group: str,
        instance_id: Optional[str] = None,
    ) -> str:
        deployment_name = require_name(deployment_name, "Deployment name")
        instance_group = require_name(instance_group, "Instance group")
        target = instance_target(instance_group, instance_id)
        logger.info(f"Getting logs for VM: {target} in deployment: {deployment_name}")
        return self._raw(f"logs -d {deployment_name} {target}", "getVmLogs")

    def get_task_logs(self, task_id: str) -> str:
        task_id = require_name(task_id, "Task ID")
        logger.info(f"Getting logs for task: {task_id}")
        return self._raw(f"task {task_id} --debug", "getTaskLogs")

    def stream_logs(self, deployment_name: str, instance_group: Optional[str] = None) -> str:
        """
        Follow deployment logs.

        The call is bounded by the executor timeout, so this returns whatever
        was collected before the CLI exited.
        """
        deployment_name = require_name(deployment_name, "Deployment name")
        command = f"logs -d {deployment_name} --follow"
        instance_group = optional_name(instance_group, "Instance group")
        if instance_group:
            command += " " + instance_group
        logger.info(f"Streaming logs for deployment: {deployment_name}")
        return self._raw(command, "streamLogs")
