"""Errand operations."""

import logging
from typing import Any

from .base import BoshService, require_name

logger = logging.getLogger("boshly.operations.errands")


class ErrandService(BoshService):

    def list_errands(self, deployment_name: str) -> Any:
        deployment_name = require_name(deployment_name, "Deployment name")
        logger.info(f"Listing errands for deployment: {deployment_name}")
        return self._structured(f"errands -d {deployment_name}", "listErrands")

    def run_errand(self, deployment_name: str, errand_name: str) -> Any:
        deployment_name = require_name(deployment_name, "Deployment name")
        errand_name = require_name(errand_name, "Errand name")
        logger.info(f"Running errand: {errand_name} for deployment: {deployment_name}")
        result = self._structured(f"run-errand -d {deployment_name} {errand_name}", "runErrand")
        logger.info(f"Errand {errand_name} executed for deployment: {deployment_name}")
        return result

    def get_errand_status(self, task_id: str) -> Any:
        task_id = require_name(task_id, "Task ID")
        logger.info(f"Getting status for errand task: {task_id}")
        return self._structured(f"task {task_id}", "getErrandStatus")
