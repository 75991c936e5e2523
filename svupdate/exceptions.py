"""
Custom exception classes for svupdate.

This module defines the exception hierarchy used throughout the application
for consistent error handling and reporting.
"""

from typing import Optional


class ServerUpdateError(Exception):
    """Base exception class for all svupdate errors."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
    
    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


class LocalStateUnavailable(ServerUpdateError):
    """Raised when the local version marker is missing or unparseable."""
    pass


class RemoteError(ServerUpdateError):
    """Raised when the build server API cannot be reached or answers badly."""
    pass


class DownloadError(ServerUpdateError):
    """Raised when file download fails."""
    pass


class IntegrityError(ServerUpdateError):
    """Raised when a downloaded artifact does not match its expected hash."""
    pass


class ValidationError(ServerUpdateError):
    """Raised when input validation fails."""
    pass


class ConfigurationError(ServerUpdateError):
    """Raised when configuration is invalid or missing."""
    pass
