"""Release and stemcell management."""

import logging
from typing import Any, Dict, List, Optional

from .base import BoshService, iter_table_rows, optional_name, require_name, require_path

logger = logging.getLogger("boshly.operations.releases")


def _versioned(name: str, version: Optional[str]) -> str:
    version = optional_name(version, "Version")
    if version:
        return f"{name}/{version}"
    return name


class ReleaseService(BoshService):

    def list_releases(self) -> Any:
        logger.info("Listing BOSH releases")
        return self._structured("releases", "listReleases")

    def upload_release(self, release_path: str) -> str:
        release_path = require_path(release_path, "Release path")
        logger.info(f"Uploading release: {release_path}")
        return self._raw("upload-release", "uploadRelease", [release_path])

    def delete_release(self, release_name: str, version: Optional[str] = None) -> str:
        release_name = require_name(release_name, "Release name")
        target = _versioned(release_name, version)
        logger.warning(f"Deleting release: {target}")
        return self._raw(f"delete-release {target} --force", "deleteRelease")

    def get_release_versions(self, release_name: str) -> List[Dict[str, Any]]:
        """Rows of the release listing that belong to ``release_name``."""
        release_name = require_name(release_name, "Release name")
        logger.info(f"Getting versions for release: {release_name}")
        result = self._structured("releases", "getReleaseVersions")
        return [row for row in iter_table_rows(result) if row.get("name") == release_name]


class StemcellService(BoshService):

    def list_stemcells(self) -> Any:
        logger.info("Listing BOSH stemcells")
        return self._structured("stemcells", "listStemcells")

    def upload_stemcell(self, stemcell_path: str) -> str:
        stemcell_path = require_path(stemcell_path, "Stemcell path")
        logger.info(f"Uploading stemcell: {stemcell_path}")
        return self._raw("upload-stemcell", "uploadStemcell", [stemcell_path])

    def delete_stemcell(self, stemcell_name: str, version: Optional[str] = None) -> str:
        stemcell_name = require_name(stemcell_name, "Stemcell name")
        target = _versioned(stemcell_name, version)
        logger.warning(f"Deleting stemcell: {target}")
        return self._raw(f"delete-stemcell {target} --force", "deleteStemcell")
