"""
Constants used throughout svupdate.

This module contains all hardcoded values used across the application
for easy maintenance and configuration.
"""

from typing import Dict

# Build numbers are unsigned 16-bit on both build servers
MIN_BUILD_NUMBER: int = 0
MAX_BUILD_NUMBER: int = 65535
MAX_VERSION_LENGTH: int = 100

# Network settings
DEFAULT_TIMEOUT_SECONDS: float = 30.0
DOWNLOAD_TIMEOUT_SECONDS: float = 300.0
DOWNLOAD_CHUNK_SIZE: int = 8192
MAX_TIMEOUT_SECONDS: float = 3600.0

# API URLs
PAPER_API_URL: str = "https://api.papermc.io/v2"
PURPUR_API_URL: str = "https://api.purpurmc.org/v2"

PAPER_PROJECT: str = "paper"
PURPUR_PROJECT: str = "purpur"

# Local files
DEFAULT_JAR_NAME: str = "server.jar"
DEFAULT_MARKER_FILE: str = "version_history.json"
MARKER_VERSION_KEY: str = "currentVersion"

# git-<serverType>-<build> (MC: <mcVersion>)
CURRENT_VERSION_PATTERN: str = r"git-(\w+)-(\d+) \(MC: ([\d.]+)\)"

# Version validation
VALID_VERSION_CHARS: str = r'^[a-zA-Z0-9._+\-]+$'

# Digest algorithms offered by the build servers
SUPPORTED_HASH_ALGORITHMS: Dict[str, str] = {
    "sha256": "SHA-256",
    "md5": "MD5",
}
