"""
Update pipeline.

Reads the local version record, asks the build server for the newest build,
and downloads and verifies the server jar when the two differ. The run is
strictly sequential: Idle -> Fetching -> Downloading -> Verifying -> Done,
with any error moving it to Failed.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .backends.base import BuildServerBackend
from .constants import DEFAULT_JAR_NAME, DEFAULT_MARKER_FILE
from .exceptions import DownloadError, ServerUpdateError
from .models import (
    LocalVersionRecord, RemoteBuildInfo, UpdateMode, UpdateResult, UpdateState
)
from .state import read_local_version_or_default
from .utils.base_api import DownloadClient, ProgressCallback
from .utils.integrity import verify_file
from .utils.validation import validate_update_request

logger = logging.getLogger(__name__)


def needs_update(local: LocalVersionRecord, remote: RemoteBuildInfo) -> bool:
    """
    Decide whether the remote build should replace the local one.

    Only an identical server type, Minecraft version and build skips the update.
    """
    if local.server_type.lower() != remote.server_type.lower():
        return True

    if local.mc_version != remote.mc_version:
        return True

    return local.build != remote.build


def determine_mode(
    version: Optional[str],
    latest: bool,
    local: LocalVersionRecord,
) -> UpdateMode:
    """Work out which version to target from the flags and the local record."""
    if version is not None:
        return UpdateMode.VERSION
    if latest or local.is_empty:
        return UpdateMode.LATEST
    return UpdateMode.CURRENT


class ServerUpdater:
    """Keeps a single server jar in sync with a build server."""

    def __init__(
        self,
        backend: BuildServerBackend,
        downloader: DownloadClient,
        directory: Union[str, Path] = ".",
        jar_name: str = DEFAULT_JAR_NAME,
        marker_file: str = DEFAULT_MARKER_FILE,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.backend = backend
        self.downloader = downloader
        self.directory = Path(directory)
        self.artifact_path = self.directory / jar_name
        self.marker_path = self.directory / marker_file
        self.logger = log or logger
        self.state = UpdateState.IDLE

    def _set_state(self, state: UpdateState) -> None:
        self.logger.debug(f"Update state: {self.state.value} -> {state.value}")
        self.state = state

    def read_local(self) -> LocalVersionRecord:
        """Read the local version record, falling back to the empty default."""
        return read_local_version_or_default(self.marker_path, self.logger)

    def _resolve_remote(
        self,
        version: Optional[str],
        latest: bool,
        local: LocalVersionRecord,
    ) -> RemoteBuildInfo:
        mode = determine_mode(version, latest, local)
        if mode is UpdateMode.VERSION:
            self.logger.info(f"Checking requested version: {version}")
            target = version
        elif mode is UpdateMode.LATEST:
            self.logger.info("Checking the latest version")
            target = None
        else:
            self.logger.info(f"Checking the latest build of the current version {local.mc_version}")
            target = local.mc_version

        remote = self.backend.resolve(target)
        self.logger.info(f"Remote build: {remote.describe()}")
        return remote

    def check(self, version: Optional[str] = None, latest: bool = False) -> UpdateResult:
        """Report whether an update is available without downloading it."""
        version = validate_update_request(version, latest)
        local = self.read_local()

        self._set_state(UpdateState.FETCHING)
        try:
            remote = self._resolve_remote(version, latest, local)
        except ServerUpdateError:
            self._set_state(UpdateState.FAILED)
            raise

        self._set_state(UpdateState.DONE)
        available = needs_update(local, remote)
        if available:
            self.logger.info(f"Update available: {local.describe()} -> {remote.describe()}")
        else:
            self.logger.info("Latest version already downloaded")

        return UpdateResult(
            state=self.state,
            updated=False,
            local=local,
            remote=remote,
            artifact_path=self.artifact_path,
            update_available=available,
        )

    def run(
        self,
        version: Optional[str] = None,
        latest: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
        force: bool = False,
    ) -> UpdateResult:
        """
        Bring the server jar up to date.

        Args:
            version: Explicit Minecraft version to fetch the newest build of
            latest: Target the newest version regardless of the local record
            progress_callback: Optional callback for download progress
            force: Download even when the local build is already current

        Returns:
            UpdateResult describing what happened

        Raises:
            ValidationError: If both version and latest are given
            RemoteError: If the build server cannot be queried
            DownloadError: If the jar cannot be downloaded
            IntegrityError: If the jar fails hash verification (it is deleted)
        """
        version = validate_update_request(version, latest)
        local = self.read_local()

        try:
            self._set_state(UpdateState.FETCHING)
            remote = self._resolve_remote(version, latest, local)

            if not force and not needs_update(local, remote):
                self.logger.info("Latest version already downloaded")
                self._set_state(UpdateState.DONE)
                return UpdateResult(
                    state=self.state,
                    updated=False,
                    local=local,
                    remote=remote,
                    artifact_path=self.artifact_path,
                )

            self._set_state(UpdateState.DOWNLOADING)
            self.logger.info(f"Downloading {remote.describe()}")
            try:
                self.directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DownloadError(f"Cannot create directory {self.directory}", e) from e
            self.downloader.download_file(
                remote.download_url, self.artifact_path, progress_callback
            )

            self._set_state(UpdateState.VERIFYING)
            self.logger.info("Verifying downloaded file")
            verify_file(
                self.artifact_path, remote.expected_hash, remote.hash_algorithm, self.logger
            )

        except ServerUpdateError:
            self._set_state(UpdateState.FAILED)
            raise

        self._set_state(UpdateState.DONE)
        self.logger.info(f"Updated to {remote.describe()}")
        return UpdateResult(
            state=self.state,
            updated=True,
            local=local,
            remote=remote,
            artifact_path=self.artifact_path,
            update_available=True,
        )
