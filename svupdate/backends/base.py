"""
Base build server backend.

Every backend answers the same three questions (newest version, newest build
of a version, artifact name and hash of a build) against its own JSON layout.
The hash algorithm is a property of the backend.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import requests

from ..constants import DEFAULT_TIMEOUT_SECONDS
from ..exceptions import RemoteError, ValidationError
from ..models import BackendKind, RemoteBuildInfo
from ..utils.base_api import BaseHTTPClient
from ..utils.validation import UpdateValidator
from ..utils.versions import pick_latest_version

logger = logging.getLogger(__name__)


class BuildServerBackend(BaseHTTPClient, ABC):
    """Abstract client for a Minecraft server build API."""

    kind: BackendKind
    server_type: str
    hash_algorithm: str
    project: str

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the backend client.

        Args:
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            session: Optional pre-built requests session
            log: Logger injected by the caller
        """
        super().__init__(timeout, session, log or logger)
        self.base_url = base_url.rstrip('/')

    def build_url(self, endpoint: str) -> str:
        """Build full URL from endpoint."""
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    @abstractmethod
    def project_endpoint(self) -> str:
        """Endpoint listing the project's versions."""
        pass

    @abstractmethod
    def version_endpoint(self, version: str) -> str:
        """Endpoint listing the builds of a version."""
        pass

    @abstractmethod
    def build_endpoint(self, version: str, build: int) -> str:
        """Endpoint describing a single build."""
        pass

    @abstractmethod
    def download_url(self, version: str, build: int, filename: str) -> str:
        """URL the artifact of a build is served from."""
        pass

    @abstractmethod
    def _extract_builds(self, data: Dict[str, Any], version: str) -> List[Any]:
        """Pull the raw build identifiers out of a version document."""
        pass

    @abstractmethod
    def _extract_artifact(
        self, data: Dict[str, Any], version: str, build: int
    ) -> Tuple[str, str]:
        """Pull (filename, hash) out of a build document."""
        pass

    def _get_object(self, endpoint: str) -> Dict[str, Any]:
        """Fetch an endpoint that must answer with a JSON object."""
        url = self.build_url(endpoint)
        data = self.get_json(url)
        if not isinstance(data, dict):
            raise RemoteError(f"Unexpected response from {url}: expected a JSON object")
        return data

    def available_versions(self) -> List[str]:
        """Get the versions the build server offers, oldest first."""
        data = self._get_object(self.project_endpoint())
        versions = data.get("versions")
        if not isinstance(versions, list):
            raise RemoteError(f"{self.server_type} API response is missing the version list")
        return [str(v) for v in versions]

    def latest_version(self) -> str:
        """
        Get the newest Minecraft version offered.

        This is the highest stable release by version ordering, not simply
        the last entry of the API's list, so a snapshot or pre-release listed
        last is skipped. The last entry is used only when no entry parses as
        a stable release.

        Raises:
            RemoteError: If the API is unreachable or lists no versions
        """
        self.logger.info(f"Getting latest {self.server_type} version")
        latest = pick_latest_version(self.available_versions())
        if latest is None:
            raise RemoteError(f"No {self.server_type} versions found")
        self.logger.info(f"Latest {self.server_type} version is {latest}")
        return latest

    def latest_build(self, version: str) -> int:
        """
        Get the numerically highest build for a version.

        Raises:
            RemoteError: If the version has no builds or the API fails
        """
        self.logger.info(f"Getting latest {self.server_type} build for version {version}")
        data = self._get_object(self.version_endpoint(version))
        builds = [self._coerce_build(b) for b in self._extract_builds(data, version)]
        if not builds:
            raise RemoteError(f"No {self.server_type} builds found for version {version}")
        latest = max(builds)
        self.logger.info(f"Latest {self.server_type} build for {version} is {latest}")
        return latest

    def build_artifact(self, version: str, build: int) -> Tuple[str, str]:
        """
        Get the artifact filename and expected hash of a build.

        Raises:
            RemoteError: If the API fails or the build document lacks the fields
        """
        self.logger.info(f"Getting artifact information for {self.server_type} {version} build {build}")
        data = self._get_object(self.build_endpoint(version, build))
        filename, expected_hash = self._extract_artifact(data, version, build)
        if not filename or not expected_hash:
            raise RemoteError(
                f"{self.server_type} build {build} for {version} has no artifact information"
            )
        return filename, expected_hash

    def resolve(self, version: Optional[str] = None) -> RemoteBuildInfo:
        """
        Resolve the newest build of a version, or of the newest version.

        Args:
            version: Minecraft version, or None for the newest one

        Returns:
            RemoteBuildInfo describing the build and where to download it
        """
        if version is None:
            version = self.latest_version()
        build = self.latest_build(version)
        filename, expected_hash = self.build_artifact(version, build)
        return RemoteBuildInfo(
            server_type=self.server_type,
            mc_version=version,
            build=build,
            artifact_filename=filename,
            expected_hash=expected_hash,
            hash_algorithm=self.hash_algorithm,
            download_url=self.download_url(version, build, filename),
        )

    def _coerce_build(self, raw: Any) -> int:
        """Turn a build identifier (int or numeric string) into an int."""
        try:
            return UpdateValidator.validate_build_number(int(str(raw)))
        except (TypeError, ValueError, ValidationError) as e:
            raise RemoteError(f"Invalid {self.server_type} build number: {raw!r}", e) from e

    @staticmethod
    def _require(data: Dict[str, Any], *keys: str) -> Any:
        """Walk nested keys, raising RemoteError if any is missing."""
        value: Any = data
        for key in keys:
            if not isinstance(value, dict) or key not in value:
                raise RemoteError(f"Missing field {'.'.join(keys)} in API response")
            value = value[key]
        return value

    @classmethod
    def _require_str(cls, data: Dict[str, Any], *keys: str) -> str:
        """Walk nested keys to a value that must be a non-empty string."""
        value = cls._require(data, *keys)
        if not isinstance(value, str) or not value.strip():
            raise RemoteError(
                f"Field {'.'.join(keys)} in API response is not a non-empty string: {value!r}"
            )
        return value
