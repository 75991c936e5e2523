"""
Data records shared by the update pipeline.

LocalVersionRecord is what the server jar last wrote into version_history.json,
RemoteBuildInfo is what the build server reports as the newest build.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError


class UpdateMode(Enum):
    """How the wanted Minecraft version is chosen."""

    LATEST = "latest"
    VERSION = "version"
    CURRENT = "current"


class UpdateState(Enum):
    """Linear states of a single update run."""

    IDLE = "idle"
    FETCHING = "fetching"
    DOWNLOADING = "downloading"
    VERIFYING = "verifying"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class LocalVersionRecord:
    """Version information recorded by the installed server jar."""

    server_type: str
    mc_version: str
    build: int

    @classmethod
    def default(cls) -> 'LocalVersionRecord':
        """Zero value used when no usable marker file exists."""
        return cls(server_type="", mc_version="", build=0)

    @property
    def is_empty(self) -> bool:
        return not self.mc_version

    def describe(self) -> str:
        if self.is_empty:
            return "none"
        return f"{self.server_type} {self.mc_version} build {self.build}"


@dataclass(frozen=True)
class RemoteBuildInfo:
    """Newest build of a Minecraft version as reported by a build server."""

    server_type: str
    mc_version: str
    build: int
    artifact_filename: str
    expected_hash: str
    hash_algorithm: str
    download_url: str

    def describe(self) -> str:
        return f"{self.server_type} {self.mc_version} build {self.build}"


@dataclass
class UpdateResult:
    """Outcome of ServerUpdater.run or ServerUpdater.check."""

    state: UpdateState
    updated: bool
    local: LocalVersionRecord
    remote: Optional[RemoteBuildInfo] = None
    artifact_path: Optional[Path] = None
    update_available: bool = False


class BackendKind(Enum):
    """Supported build server APIs."""

    PAPER = "paper"
    PURPUR = "purpur"

    @classmethod
    def from_name(cls, name: str) -> 'BackendKind':
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(kind.value for kind in cls)
            raise ConfigurationError(
                f"Unknown backend {name!r}, expected one of: {choices}"
            ) from None
