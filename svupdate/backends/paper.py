"""
Paper build server backend.

This module talks to the PaperMC v2 API, which publishes a SHA-256 digest
for every build's application download.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from ..constants import DEFAULT_TIMEOUT_SECONDS, PAPER_API_URL, PAPER_PROJECT
from ..models import BackendKind
from .base import BuildServerBackend

logger = logging.getLogger(__name__)


class PaperBackend(BuildServerBackend):
    """API client for the Paper build server."""

    kind = BackendKind.PAPER
    server_type = "Paper"
    hash_algorithm = "sha256"
    project = PAPER_PROJECT

    def __init__(
        self,
        base_url: str = PAPER_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(base_url, timeout, session, log or logger)

    def project_endpoint(self) -> str:
        return f"projects/{self.project}"

    def version_endpoint(self, version: str) -> str:
        return f"projects/{self.project}/versions/{version}"

    def build_endpoint(self, version: str, build: int) -> str:
        return f"projects/{self.project}/versions/{version}/builds/{build}"

    def download_url(self, version: str, build: int, filename: str) -> str:
        return self.build_url(f"{self.build_endpoint(version, build)}/downloads/{filename}")

    def _extract_builds(self, data: Dict[str, Any], version: str) -> List[Any]:
        builds = self._require(data, "builds")
        if not isinstance(builds, list):
            return []
        return builds

    def _extract_artifact(
        self, data: Dict[str, Any], version: str, build: int
    ) -> Tuple[str, str]:
        application = self._require(data, "downloads", "application")
        return self._require_str(application, "name"), self._require_str(application, "sha256")
