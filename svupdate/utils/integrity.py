"""
Checksum verification for downloaded server jars.

Paper publishes SHA-256 digests and Purpur publishes MD5 digests; the
algorithm is chosen by the backend that produced the expected hash.
"""

import hashlib
import logging
import os
from pathlib import Path
from typing import Optional, Union

from ..constants import DOWNLOAD_CHUNK_SIZE, SUPPORTED_HASH_ALGORITHMS
from ..exceptions import ConfigurationError, IntegrityError

logger = logging.getLogger(__name__)


def compute_digest(
    path: Union[str, Path],
    algorithm: str,
    chunk_size: int = DOWNLOAD_CHUNK_SIZE,
) -> str:
    """
    Compute the hex digest of a file.

    Args:
        path: File to hash
        algorithm: Digest name, one of SUPPORTED_HASH_ALGORITHMS
        chunk_size: Size of chunks to read at once

    Returns:
        Lowercase hex digest

    Raises:
        ConfigurationError: If the algorithm is not supported
        IntegrityError: If the file cannot be read
    """
    algorithm = algorithm.lower()
    if algorithm not in SUPPORTED_HASH_ALGORITHMS:
        raise ConfigurationError(f"Unsupported hash algorithm: {algorithm}")

    hasher = hashlib.new(algorithm)
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                hasher.update(chunk)
    except OSError as e:
        raise IntegrityError(f"Failed to read file {path}", e) from e

    return hasher.hexdigest()


def verify_file(
    path: Union[str, Path],
    expected_hash: str,
    algorithm: str,
    log: Optional[logging.Logger] = None,
) -> None:
    """
    Verify a file against its expected digest, deleting it on mismatch.

    The comparison is case-insensitive. A file that matches is left in place.

    Raises:
        IntegrityError: If the digest differs or the file cannot be read
    """
    log = log or logger
    path = Path(path)
    label = SUPPORTED_HASH_ALGORITHMS.get(algorithm.lower(), algorithm)

    local_hash = compute_digest(path, algorithm)
    if local_hash.lower() != expected_hash.strip().lower():
        log.error(
            f"Hash mismatch for {path}: expected {expected_hash.upper()}, got {local_hash.upper()}"
        )
        try:
            os.remove(path)
        except OSError as e:
            raise IntegrityError(
                f"Hash verification failed for {path} and the file could not be removed", e
            ) from e
        raise IntegrityError(f"{label} verification failed for {path}")

    log.info(f"{label} hash verified for {path}")
