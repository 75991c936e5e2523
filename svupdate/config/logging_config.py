"""
Logging configuration for svupdate.

This module sets up logging with optional file rotation, rich console
output, and configurable log levels. The configured application logger is
returned so it can be handed to each component.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .settings import APP_NAME, Config

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"


def setup_logging(
    config: Config,
    log_level: Optional[str] = None,
    enable_file_logging: Optional[bool] = None,
    enable_rich_logging: Optional[bool] = None,
    console: Optional[Console] = None,
) -> logging.Logger:
    """Setup logging configuration and return the application logger."""

    # Get configuration values
    log_level = log_level or config.get("logging.level", "INFO")
    enable_file_logging = enable_file_logging if enable_file_logging is not None else config.get("logging.file_logging", False)
    enable_rich_logging = enable_rich_logging if enable_rich_logging is not None else config.get("ui.colored_output", True)

    # Convert log level string to logging constant
    numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)

    app_logger = logging.getLogger(APP_NAME)
    app_logger.handlers.clear()
    app_logger.setLevel(logging.DEBUG if enable_file_logging else numeric_level)
    app_logger.propagate = False

    # Console handler
    if enable_rich_logging and sys.stderr.isatty():
        console_handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        console_formatter = logging.Formatter("%(message)s")
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_formatter = logging.Formatter(PLAIN_FORMAT, datefmt="%H:%M:%S")

    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(numeric_level)
    app_logger.addHandler(console_handler)

    # File handler (if enabled)
    if enable_file_logging:
        try:
            log_file = Path(config.get("logging.log_file"))
            log_file.parent.mkdir(parents=True, exist_ok=True)

            max_bytes = _parse_size(str(config.get("logging.max_log_size", "10MB")))
            backup_count = config.get("logging.backup_count", 5)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            file_handler.setLevel(logging.DEBUG)  # File logs everything
            app_logger.addHandler(file_handler)

        except (OSError, TypeError, ValueError) as e:
            app_logger.warning(f"Failed to setup file logging: {e}")

    # Set specific logger levels
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    app_logger.debug(f"Logging setup complete. Level: {log_level}, File: {enable_file_logging}")
    return app_logger


def _parse_size(size_str: str) -> int:
    """Parse size string like '10MB' to bytes."""
    size_str = size_str.strip().upper()

    # Longest suffix first
    multipliers = {
        'GB': 1024 ** 3,
        'MB': 1024 ** 2,
        'KB': 1024,
        'B': 1,
    }

    for suffix, multiplier in multipliers.items():
        if size_str.endswith(suffix):
            try:
                number = float(size_str[:-len(suffix)])
                return int(number * multiplier)
            except ValueError:
                break

    # Default to 10MB if parsing fails
    return 10 * 1024 ** 2
