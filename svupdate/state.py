"""
Local version state.

Paper and Purpur record the running build in version_history.json, for example
``{"currentVersion": "git-Paper-100 (MC: 1.20.1)"}``. This module reads that
file and turns the free-text field into a LocalVersionRecord. Nothing here
writes the file; the server jar does that on its next start.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .constants import (
    CURRENT_VERSION_PATTERN, MARKER_VERSION_KEY,
    MIN_BUILD_NUMBER, MAX_BUILD_NUMBER
)
from .exceptions import LocalStateUnavailable
from .models import LocalVersionRecord

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(CURRENT_VERSION_PATTERN)


def parse_current_version(current_version: str) -> LocalVersionRecord:
    """
    Parse a ``git-<serverType>-<build> (MC: <mcVersion>)`` string.

    Args:
        current_version: Value of the currentVersion field

    Returns:
        Parsed LocalVersionRecord

    Raises:
        LocalStateUnavailable: If the text does not match or the build is out of range
    """
    if not isinstance(current_version, str):
        raise LocalStateUnavailable("currentVersion must be a string")

    match = _VERSION_RE.search(current_version)
    if not match:
        raise LocalStateUnavailable(
            f"currentVersion does not match the expected pattern: {current_version!r}"
        )

    server_type, build_str, mc_version = match.groups()
    build = int(build_str)
    if build < MIN_BUILD_NUMBER or build > MAX_BUILD_NUMBER:
        raise LocalStateUnavailable(f"Build number {build} is out of range")

    return LocalVersionRecord(server_type=server_type, mc_version=mc_version, build=build)


def read_version_history(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load version_history.json as a JSON object.

    Raises:
        LocalStateUnavailable: If the file is missing, unreadable or not a JSON object
    """
    path = Path(path)
    if not path.exists():
        raise LocalStateUnavailable(f"Failed to find version history at {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise LocalStateUnavailable(f"Failed to read version history {path}", e) from e
    except ValueError as e:
        raise LocalStateUnavailable(f"Failed to parse version history {path} as JSON", e) from e

    if not isinstance(data, dict):
        raise LocalStateUnavailable(f"Version history {path} is not a JSON object")

    return data


def read_local_version(
    path: Union[str, Path],
    log: Optional[logging.Logger] = None,
) -> Optional[LocalVersionRecord]:
    """
    Read the locally recorded version, or None if it is not available.

    Never raises: a missing or malformed marker file simply means there is no
    local record.
    """
    log = log or logger
    path = Path(path)

    log.info("Checking for existing local version information")
    if not path.exists():
        log.info(f"No version history found at {path}")
        return None

    try:
        history = read_version_history(path)
        current_version = history.get(MARKER_VERSION_KEY)
        if current_version is None:
            raise LocalStateUnavailable(f"{MARKER_VERSION_KEY} missing from {path}")
        record = parse_current_version(current_version)
    except LocalStateUnavailable as e:
        log.warning(f"Failed to extract local version information: {e}")
        return None

    log.info(f"Local version found: {record.describe()}")
    return record


def read_local_version_or_default(
    path: Union[str, Path],
    log: Optional[logging.Logger] = None,
) -> LocalVersionRecord:
    """Read the local record, substituting the empty default when absent."""
    record = read_local_version(path, log)
    if record is None:
        return LocalVersionRecord.default()
    return record
