"""Tests for YAML configuration and logging setup."""

import logging
import logging.handlers

import pytest
import yaml

from svupdate.config.logging_config import _parse_size, setup_logging
from svupdate.config.settings import Config
from svupdate.constants import PAPER_API_URL
from svupdate.exceptions import ConfigurationError
from svupdate.models import BackendKind


def test_missing_config_file_is_created_with_defaults(tmp_path):
    config_file = tmp_path / "svupdate" / "config.yaml"

    config = Config(config_file)

    assert config_file.exists()
    assert config.get("server.backend") == "paper"
    assert config.get("server.jar_name") == "server.jar"
    assert config.get("api.paper_url") == PAPER_API_URL
    assert yaml.safe_load(config_file.read_text())["server"]["marker_file"] == "version_history.json"


def test_user_values_merge_over_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump({
        "server": {"backend": "purpur", "directory": "/srv/minecraft"},
        "api": {"timeout": 5},
    }))

    config = Config(config_file)

    assert config.get_backend_kind() is BackendKind.PURPUR
    assert str(config.get_server_directory()) == "/srv/minecraft"
    assert config.get_timeout("api.timeout") == 5.0
    assert config.get("server.jar_name") == "server.jar"
    assert config.get("downloads.chunk_size") == 8192


def test_broken_config_falls_back_to_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("server: [unclosed")

    config = Config(config_file)

    assert config.get("server.backend") == "paper"


def test_non_mapping_config_falls_back_to_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("- just\n- a list\n")

    assert Config(config_file).get("server.backend") == "paper"


def test_get_set_dot_notation(tmp_path):
    config = Config(tmp_path / "config.yaml")

    config.set("server.backend", "purpur")
    config.set("extra.nested.value", 3)

    assert config.get("server.backend") == "purpur"
    assert config.get("extra.nested.value") == 3
    assert config.get("does.not.exist", "fallback") == "fallback"


def test_save_config(tmp_path):
    config_file = tmp_path / "config.yaml"
    config = Config(config_file)
    config.set("server.backend", "purpur")
    assert config.save_config()

    assert Config(config_file).get("server.backend") == "purpur"


def test_set_without_save_leaves_file_untouched(tmp_path):
    config_file = tmp_path / "config.yaml"
    Config(config_file).set("server.backend", "purpur")

    assert Config(config_file).get("server.backend") == "paper"


def test_defaults_are_not_shared_between_instances(tmp_path):
    first = Config(tmp_path / "a.yaml")
    first.set("server.backend", "purpur")

    assert Config(tmp_path / "b.yaml").get("server.backend") == "paper"


@pytest.mark.parametrize("key, value, getter", [
    ("server.backend", "spigot", lambda c: c.get_backend_kind()),
    ("api.paper_url", "ftp://example.test", lambda c: c.get_api_url(BackendKind.PAPER)),
    ("api.timeout", -1, lambda c: c.get_timeout("api.timeout")),
    ("downloads.chunk_size", 0, lambda c: c.get_chunk_size()),
])
def test_invalid_values_raise_configuration_error(tmp_path, key, value, getter):
    config = Config(tmp_path / "config.yaml")
    config.set(key, value)

    with pytest.raises(ConfigurationError):
        getter(config)


@pytest.mark.parametrize("size, expected", [
    ("10MB", 10 * 1024 ** 2),
    ("512KB", 512 * 1024),
    ("1gb", 1024 ** 3),
    ("100B", 100),
    ("lots", 10 * 1024 ** 2),
])
def test_parse_size(size, expected):
    assert _parse_size(size) == expected


def test_setup_logging_returns_configured_app_logger(tmp_path):
    config = Config(tmp_path / "config.yaml")
    config.set("logging.log_file", str(tmp_path / "logs" / "svupdate.log"))

    log = setup_logging(config, log_level="DEBUG", enable_file_logging=True, enable_rich_logging=False)
    log.info("hello from the test")
    for handler in log.handlers:
        handler.flush()

    assert log.name == "svupdate"
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in log.handlers)
    assert "hello from the test" in (tmp_path / "logs" / "svupdate.log").read_text()

    for handler in log.handlers:
        handler.close()
