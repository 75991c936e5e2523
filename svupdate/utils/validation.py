"""
Common validation utilities for svupdate.

This module provides shared validation functions for user supplied values
such as the requested Minecraft version and configured timeouts.
"""

import re
from typing import Any, Optional

from ..constants import (
    MIN_BUILD_NUMBER, MAX_BUILD_NUMBER, MAX_VERSION_LENGTH,
    MAX_TIMEOUT_SECONDS, VALID_VERSION_CHARS
)
from ..exceptions import ValidationError


class BaseValidator:
    """Base validator class with common validation methods."""
    
    @staticmethod
    def validate_non_empty_string(value: Any, field_name: str) -> str:
        """Validate that value is a non-empty string."""
        if not isinstance(value, str):
            raise ValidationError(f"{field_name} must be a string")
        
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field_name} cannot be empty")
        
        return stripped
    
    @staticmethod
    def validate_integer_range(
        value: Any, 
        field_name: str, 
        min_value: int, 
        max_value: int
    ) -> int:
        """Validate that value is an integer within the specified range."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{field_name} must be an integer")
        
        if value < min_value or value > max_value:
            raise ValidationError(
                f"{field_name} must be between {min_value} and {max_value}"
            )
        
        return value


class UpdateValidator(BaseValidator):
    """Validator for update request inputs."""
    
    @staticmethod
    def validate_version(version: Any) -> str:
        """Validate Minecraft version string."""
        version_str = UpdateValidator.validate_non_empty_string(version, "Version")
        
        if len(version_str) > MAX_VERSION_LENGTH:
            raise ValidationError(f"Version must be no more than {MAX_VERSION_LENGTH} characters")
        
        if not re.match(VALID_VERSION_CHARS, version_str):
            raise ValidationError(
                "Version must have valid characters "
                "(alphanumeric, dots, dashes, underscores, plus signs only)"
            )
        
        return version_str
    
    @staticmethod
    def validate_build_number(build: Any) -> int:
        """Validate a build number reported by a build server."""
        return UpdateValidator.validate_integer_range(
            build, "Build number", MIN_BUILD_NUMBER, MAX_BUILD_NUMBER
        )
    
    @staticmethod
    def validate_timeout(timeout: Any) -> float:
        """Validate timeout value."""
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ValidationError("Timeout must be a number")
        
        if timeout <= 0:
            raise ValidationError("Timeout must be positive")
        
        if timeout > MAX_TIMEOUT_SECONDS:
            raise ValidationError(f"Timeout cannot exceed {MAX_TIMEOUT_SECONDS:.0f} seconds")
        
        return float(timeout)


def validate_update_request(version: Optional[str], latest: bool) -> Optional[str]:
    """
    Validate the version selection flags.
    
    Args:
        version: Explicitly requested Minecraft version, if any
        latest: Whether the absolute newest version was requested
        
    Returns:
        The cleaned version string, or None
        
    Raises:
        ValidationError: If both flags are given or the version is malformed
    """
    if version is not None and latest:
        raise ValidationError("--version and --latest are mutually exclusive")
    
    if version is None:
        return None
    
    return UpdateValidator.validate_version(version)
