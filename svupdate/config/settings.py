"""
Configuration management for svupdate.

This module handles configuration loading, validation, and management
using a YAML file in the user's config directory.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from platformdirs import user_config_dir, user_log_dir

from ..constants import (
    DEFAULT_JAR_NAME, DEFAULT_MARKER_FILE, DEFAULT_TIMEOUT_SECONDS,
    DOWNLOAD_CHUNK_SIZE, DOWNLOAD_TIMEOUT_SECONDS, PAPER_API_URL, PURPUR_API_URL
)
from ..exceptions import ConfigurationError, ValidationError
from ..models import BackendKind
from ..utils.validation import UpdateValidator

logger = logging.getLogger(__name__)

APP_NAME = "svupdate"


class Config:
    """Configuration manager for svupdate."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None) -> None:
        self.app_name = APP_NAME
        if config_file is None:
            self.config_dir = Path(user_config_dir(self.app_name))
            self.config_file = self.config_dir / "config.yaml"
        else:
            self.config_file = Path(config_file)
            self.config_dir = self.config_file.parent
        self.log_dir = Path(user_log_dir(self.app_name))

        # Default configuration
        self._defaults = {
            "server": {
                "backend": BackendKind.PAPER.value,
                "directory": ".",
                "jar_name": DEFAULT_JAR_NAME,
                "marker_file": DEFAULT_MARKER_FILE,
            },
            "api": {
                "timeout": DEFAULT_TIMEOUT_SECONDS,
                "paper_url": PAPER_API_URL,
                "purpur_url": PURPUR_API_URL,
            },
            "downloads": {
                "timeout": DOWNLOAD_TIMEOUT_SECONDS,
                "chunk_size": DOWNLOAD_CHUNK_SIZE,
            },
            "logging": {
                "level": "INFO",
                "file_logging": False,
                "log_file": str(self.log_dir / "svupdate.log"),
                "max_log_size": "10MB",
                "backup_count": 5,
            },
            "ui": {
                "progress_bar": True,
                "colored_output": True,
            }
        }

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file or create default."""
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    config = yaml.safe_load(f) or {}

                if not isinstance(config, dict):
                    raise ConfigurationError("top level of the config file must be a mapping")

                # Merge with defaults
                merged_config = self._merge_configs(self._defaults, config)

                logger.info(f"Loaded configuration from {self.config_file}")
                return merged_config

            except (OSError, yaml.YAMLError, ConfigurationError) as e:
                logger.warning(f"Failed to load config file: {e}. Using defaults.")
                return copy.deepcopy(self._defaults)
        else:
            # Create default config file
            self.save_config(self._defaults)
            return copy.deepcopy(self._defaults)

    def _merge_configs(self, defaults: Dict, user_config: Dict) -> Dict:
        """Recursively merge user config with defaults."""
        result = copy.deepcopy(defaults)

        for key, value in user_config.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split('.')
        value = self._config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation."""
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def save_config(self, config: Optional[Dict] = None) -> bool:
        """Save configuration to file."""
        try:
            config_to_save = config or self._config

            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, 'w') as f:
                yaml.safe_dump(config_to_save, f, default_flow_style=False, indent=2)

            logger.info(f"Configuration saved to {self.config_file}")
            return True

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to save configuration: {e}")
            return False

    def get_backend_kind(self) -> BackendKind:
        """Get the configured build server."""
        return BackendKind.from_name(str(self.get("server.backend", BackendKind.PAPER.value)))

    def get_api_url(self, kind: BackendKind) -> str:
        """Get the API base URL for a build server."""
        url = self.get(f"api.{kind.value}_url")
        if not isinstance(url, str) or not url.startswith(("http://", "https://")):
            raise ConfigurationError(f"api.{kind.value}_url must be an http(s) URL")
        return url

    def get_timeout(self, key: str) -> float:
        """Get a validated timeout value."""
        try:
            return UpdateValidator.validate_timeout(self.get(key))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {key}: {e}") from e

    def get_server_directory(self) -> Path:
        """Get the directory holding the server jar and version history."""
        return Path(str(self.get("server.directory", "."))).expanduser()

    def get_chunk_size(self) -> int:
        """Get the download chunk size in bytes."""
        chunk_size = self.get("downloads.chunk_size")
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
            raise ConfigurationError("downloads.chunk_size must be a positive integer")
        return chunk_size
