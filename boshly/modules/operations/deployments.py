"""Deployment lifecycle operations."""

import logging
from typing import Any, List

from .base import BoshService, iter_table_rows, require_name, require_path

logger = logging.getLogger("boshly.operations.deployments")


class DeploymentService(BoshService):
    """List, inspect, deploy and delete BOSH deployments."""

    def list_deployments(self) -> List[str]:
        """Names of all deployments on the director."""
        logger.info("Listing BOSH deployments")
        result = self._structured("deployments", "listDeployments")
        names = [row["name"] for row in iter_table_rows(result) if "name" in row]
        logger.info(f"Found {len(names)} deployments")
        return names

    def get_deployment(self, deployment_name: str) -> Any:
        deployment_name = require_name(deployment_name, "Deployment name")
        logger.info(f"Getting deployment details for: {deployment_name}")
        return self._structured(f"deployment -d {deployment_name}", "getDeployment")

    def deploy_deployment(self, deployment_name: str, manifest_path: str) -> str:
        deployment_name = require_name(deployment_name, "Deployment name")
        manifest_path = require_path(manifest_path, "Manifest path")
        logger.info(f"Deploying deployment: {deployment_name} with manifest: {manifest_path}")
        output = self._raw(f"deploy -d {deployment_name}", "deployDeployment", [manifest_path])
        logger.info(f"Deployment {deployment_name} deployed successfully")
        return output

    def update_deployment(self, deployment_name: str, manifest_path: str) -> str:
        """Re-deploy with an updated manifest. Same CLI verb as deploy."""
        deployment_name = require_name(deployment_name, "Deployment name")
        manifest_path = require_path(manifest_path, "Manifest path")
        logger.info(f"Updating deployment: {deployment_name} with manifest: {manifest_path}")
        output = self._raw(f"deploy -d {deployment_name}", "updateDeployment", [manifest_path])
        logger.info(f"Deployment {deployment_name} updated successfully")
        return output

    def delete_deployment(self, deployment_name: str) -> str:
        deployment_name = require_name(deployment_name, "Deployment name")
        logger.warning(f"Deleting deployment: {deployment_name}")
        output = self._raw(f"delete-deployment -d {deployment_name} --force", "deleteDeployment")
        logger.info(f"Deployment {deployment_name} deleted successfully")
        return output

    def recreate_deployment(self, deployment_name: str) -> str:
        deployment_name = require_name(deployment_name, "Deployment name")
        logger.info(f"Recreating deployment: {deployment_name}")
        output = self._raw(f"recreate -d {deployment_name}", "recreateDeployment")
        logger.info(f"Deployment {deployment_name} recreated successfully")
        return output
