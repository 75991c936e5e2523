"""
Base HTTP classes with common functionality.

This module provides the JSON client the build server backends are built on
and the streaming download client used for server jars.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Protocol, Union

import httpx
import requests

from ..constants import DEFAULT_TIMEOUT_SECONDS, DOWNLOAD_CHUNK_SIZE, DOWNLOAD_TIMEOUT_SECONDS
from ..exceptions import DownloadError, RemoteError

logger = logging.getLogger(__name__)


class ProgressCallback(Protocol):
    """Protocol for progress callback functions."""

    def __call__(self, downloaded: int, total: int) -> None:
        """Called with download progress information."""
        ...


class BaseHTTPClient:
    """Base class for JSON API clients."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            timeout: Timeout for requests in seconds
            session: Optional pre-built requests session
            log: Logger used for request diagnostics
        """
        self.timeout = timeout
        self._session = session
        self.logger = log or logger

    @property
    def session(self) -> requests.Session:
        """Get or create synchronous HTTP session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def get_json(self, url: str, **kwargs: Any) -> Any:
        """
        Perform GET request and return the decoded JSON body.

        Args:
            url: URL to request
            **kwargs: Additional arguments passed to requests

        Returns:
            Decoded JSON document

        Raises:
            RemoteError: If request fails, returns a non-2xx status or non-JSON response
        """
        kwargs.setdefault("timeout", self.timeout)
        self.logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            self.logger.error(f"HTTP request failed for {url}: {e}")
            raise RemoteError(f"Failed to fetch data from {url}", e) from e
        except ValueError as e:
            self.logger.error(f"Invalid JSON response from {url}: {e}")
            raise RemoteError(f"Invalid JSON response from {url}", e) from e

    def close(self) -> None:
        """Close HTTP connections."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> 'BaseHTTPClient':
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


class DownloadClient:
    """Streams files to disk with optional progress tracking."""

    def __init__(
        self,
        timeout: float = DOWNLOAD_TIMEOUT_SECONDS,
        chunk_size: int = DOWNLOAD_CHUNK_SIZE,
        client: Optional[httpx.Client] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the download client.

        Args:
            timeout: Download timeout in seconds
            chunk_size: Size of chunks to read at once
            client: Optional pre-built httpx client
            log: Logger used for download diagnostics
        """
        self.timeout = timeout
        self.chunk_size = chunk_size
        self._client = client
        self.logger = log or logger

    @property
    def client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, follow_redirects=True)
        return self._client

    def download_file(
        self,
        url: str,
        destination: Union[str, Path],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Path:
        """
        Download file, overwriting any existing file at destination.

        Args:
            url: URL to download from
            destination: Local file path to save to
            progress_callback: Optional callback for progress updates

        Returns:
            Path of the written file

        Raises:
            DownloadError: If the request fails, the server answers non-2xx
                or the file cannot be written
        """
        destination = Path(destination)
        self.logger.info(f"Downloading {url} to {destination}")
        opened = False

        try:
            with self.client.stream("GET", url) as response:
                response.raise_for_status()

                total_size = int(response.headers.get("content-length", 0))
                downloaded = 0

                with open(destination, "wb") as file:
                    opened = True
                    for chunk in response.iter_bytes(chunk_size=self.chunk_size):
                        file.write(chunk)
                        downloaded += len(chunk)

                        if progress_callback and total_size > 0:
                            progress_callback(downloaded, total_size)

        except httpx.HTTPStatusError as e:
            self.logger.error(f"Failed to download {url}: HTTP {e.response.status_code}")
            raise DownloadError(
                f"Failed to download {url}: HTTP {e.response.status_code}", e
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as e:
            self.logger.error(f"Failed to download {url}: {e}")
            if opened:
                self._remove_partial(destination)
            raise DownloadError(f"Failed to download {url}", e) from e
        except OSError as e:
            self.logger.error(f"Failed to write file {destination}: {e}")
            if opened:
                self._remove_partial(destination)
            raise DownloadError(f"Failed to write file {destination}", e) from e

        self.logger.info(f"Successfully downloaded {url} to {destination}")
        return destination

    def _remove_partial(self, destination: Path) -> None:
        """Remove a partially written download."""
        try:
            if destination.exists():
                os.remove(destination)
                self.logger.debug(f"Removed partial download {destination}")
        except OSError as e:
            self.logger.warning(f"Failed to remove partial download {destination}: {e}")

    def close(self) -> None:
        """Close HTTP connections."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> 'DownloadClient':
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
