"""Cloud config operations."""

import logging

from .base import BoshService, require_path

logger = logging.getLogger("boshly.operations.cloud_config")


class CloudConfigService(BoshService):

    def get_cloud_config(self) -> str:
        logger.info("Getting BOSH cloud config")
        return self._raw("cloud-config", "getCloudConfig")

    def update_cloud_config(self, config_path: str) -> str:
        config_path = require_path(config_path, "Cloud config path")
        logger.info(f"Updating BOSH cloud config from: {config_path}")
        return self._raw("update-cloud-config", "updateCloudConfig", [config_path])

    def get_cloud_config_diff(self, config_path: str) -> str:
        config_path = require_path(config_path, "Cloud config path")
        logger.info(f"Getting cloud config diff for: {config_path}")
        return self._raw("cloud-config --diff", "getCloudConfigDiff", [config_path])
