"""
Purpur build server backend.

The Purpur API nests builds under ``builds.all`` and ``builds.latest`` and
publishes an MD5 digest per build. Artifacts carry no filename of their own,
so one is derived from the version and build.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from ..constants import DEFAULT_TIMEOUT_SECONDS, PURPUR_API_URL, PURPUR_PROJECT
from ..models import BackendKind
from .base import BuildServerBackend

logger = logging.getLogger(__name__)


class PurpurBackend(BuildServerBackend):
    """API client for the Purpur build server."""

    kind = BackendKind.PURPUR
    server_type = "Purpur"
    hash_algorithm = "md5"
    project = PURPUR_PROJECT

    def __init__(
        self,
        base_url: str = PURPUR_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(base_url, timeout, session, log or logger)

    def project_endpoint(self) -> str:
        return self.project

    def version_endpoint(self, version: str) -> str:
        return f"{self.project}/{version}"

    def build_endpoint(self, version: str, build: int) -> str:
        return f"{self.project}/{version}/{build}"

    def download_url(self, version: str, build: int, filename: str) -> str:
        return self.build_url(f"{self.build_endpoint(version, build)}/download")

    def _extract_builds(self, data: Dict[str, Any], version: str) -> List[Any]:
        builds = self._require(data, "builds")
        if not isinstance(builds, dict):
            return []

        candidates = list(builds.get("all") or [])
        # "latest" is absent or null for versions without builds
        if builds.get("latest") is not None:
            candidates.append(builds["latest"])
        return candidates

    def _extract_artifact(
        self, data: Dict[str, Any], version: str, build: int
    ) -> Tuple[str, str]:
        md5 = self._require_str(data, "md5")
        return f"{self.project}-{version}-{build}.jar", md5
