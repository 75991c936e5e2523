"""Minecraft version ordering helpers."""

from typing import Iterable, List, Optional

from packaging import version as pkg_version


def parse_release(version_str: str) -> Optional[pkg_version.Version]:
    """Parse a stable release version, or None for snapshots and pre-releases."""
    try:
        parsed = pkg_version.parse(version_str)
    except pkg_version.InvalidVersion:
        return None
    if parsed.is_prerelease or parsed.is_devrelease:
        return None
    return parsed


def pick_latest_version(versions: Iterable[str]) -> Optional[str]:
    """
    Pick the newest stable release from a build server's version list.

    Falls back to the last listed entry when nothing parses as a stable
    release, since both build servers list versions oldest first.
    """
    candidates: List[str] = [str(v) for v in versions]
    if not candidates:
        return None

    releases = [(parse_release(v), v) for v in candidates]
    releases = [(parsed, v) for parsed, v in releases if parsed is not None]
    if not releases:
        return candidates[-1]

    return max(releases, key=lambda item: item[0])[1]
