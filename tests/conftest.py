"""Shared fixtures: a routed fake requests session and httpx mock downloads."""

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
import pytest
import requests

from svupdate.utils.base_api import DownloadClient

PAPER_BASE = "https://api.papermc.io/v2"
PURPUR_BASE = "https://api.purpurmc.org/v2"

JAR_BYTES = b"PK\x03\x04 fake server jar contents"
JAR_SHA256 = hashlib.sha256(JAR_BYTES).hexdigest()
JAR_MD5 = hashlib.md5(JAR_BYTES).hexdigest()


class FakeResponse:
    """Just enough of requests.Response for BaseHTTPClient.get_json."""

    def __init__(self, url: str, payload: Any = None, status_code: int = 200, text: Optional[str] = None):
        self.url = url
        self.status_code = status_code
        self._payload = payload
        self._text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error for url: {self.url}", response=self)

    def json(self) -> Any:
        if self._text is not None:
            return json.loads(self._text)
        return self._payload


class FakeSession:
    """Routes GET requests to canned JSON documents by exact URL."""

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes: Dict[str, Any] = dict(routes or {})
        self.requested = []
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.requested.append(url)
        if url not in self.routes:
            return FakeResponse(url, status_code=404)
        route = self.routes[url]
        if isinstance(route, Exception):
            raise route
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(url, route)

    def close(self) -> None:
        self.closed = True


def paper_routes(
    versions=("1.20.1", "1.20.4"),
    builds=None,
    sha256: str = JAR_SHA256,
) -> Dict[str, Any]:
    """Canned Paper API documents; every version gets the given builds."""
    builds = list(builds if builds is not None else [99, 100, 101])
    routes: Dict[str, Any] = {f"{PAPER_BASE}/projects/paper": {"project_id": "paper", "versions": list(versions)}}
    for version in versions:
        routes[f"{PAPER_BASE}/projects/paper/versions/{version}"] = {"version": version, "builds": builds}
        for build in builds:
            routes[f"{PAPER_BASE}/projects/paper/versions/{version}/builds/{build}"] = {
                "build": build,
                "downloads": {
                    "application": {"name": f"paper-{version}-{build}.jar", "sha256": sha256},
                },
            }
    return routes


def purpur_routes(
    versions=("1.20.1", "1.20.4"),
    builds=("2060", "2061", "2062"),
    md5: str = JAR_MD5,
) -> Dict[str, Any]:
    """Canned Purpur API documents."""
    builds = list(builds)
    routes: Dict[str, Any] = {f"{PURPUR_BASE}/purpur": {"project": "purpur", "versions": list(versions)}}
    for version in versions:
        routes[f"{PURPUR_BASE}/purpur/{version}"] = {
            "project": "purpur",
            "version": version,
            "builds": {"all": builds, "latest": builds[-1] if builds else None},
        }
        for build in builds:
            routes[f"{PURPUR_BASE}/purpur/{version}/{build}"] = {
                "project": "purpur",
                "version": version,
                "build": build,
                "md5": md5,
                "result": "SUCCESS",
            }
    return routes


def jar_transport(body: bytes = JAR_BYTES, status_code: int = 200, seen: Optional[list] = None) -> httpx.MockTransport:
    """httpx transport serving the same body for every request."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(str(request.url))
        return httpx.Response(status_code, content=body)

    return httpx.MockTransport(handler)


def make_downloader(transport: httpx.MockTransport, chunk_size: int = 8) -> DownloadClient:
    return DownloadClient(chunk_size=chunk_size, client=httpx.Client(transport=transport))


def write_marker(directory: Path, current_version: str, name: str = "version_history.json") -> Path:
    path = directory / name
    path.write_text(json.dumps({"currentVersion": current_version}), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_app_logger():
    """The CLI configures the svupdate logger; undo that between tests."""
    yield
    app_logger = logging.getLogger("svupdate")
    app_logger.handlers.clear()
    app_logger.propagate = True
    app_logger.setLevel(logging.NOTSET)
