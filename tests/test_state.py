"""Tests for reading the local version_history.json marker."""

import json

import pytest

from svupdate.exceptions import LocalStateUnavailable
from svupdate.models import LocalVersionRecord
from svupdate.state import (
    parse_current_version, read_local_version, read_local_version_or_default,
    read_version_history
)

from conftest import write_marker


@pytest.mark.parametrize("text, expected", [
    ("git-Paper-100 (MC: 1.20.1)", LocalVersionRecord("Paper", "1.20.1", 100)),
    ("git-Purpur-2062 (MC: 1.20.4)", LocalVersionRecord("Purpur", "1.20.4", 2062)),
    ("git-Paper-7 (MC: 1.21)", LocalVersionRecord("Paper", "1.21", 7)),
    ("This server is running git-Paper-196 (MC: 1.20.1)", LocalVersionRecord("Paper", "1.20.1", 196)),
    ("git-Paper-65535 (MC: 1.8.8)", LocalVersionRecord("Paper", "1.8.8", 65535)),
])
def test_parse_current_version(text, expected):
    assert parse_current_version(text) == expected


@pytest.mark.parametrize("text", [
    "",
    "Paper 1.20.1",
    "git-Paper-abc (MC: 1.20.1)",
    "git-Paper-100 MC: 1.20.1",
    "git-Paper-70000 (MC: 1.20.1)",
])
def test_parse_current_version_rejects_malformed(text):
    with pytest.raises(LocalStateUnavailable):
        parse_current_version(text)


def test_parse_current_version_rejects_non_string():
    with pytest.raises(LocalStateUnavailable):
        parse_current_version(100)


def test_read_local_version(tmp_path):
    path = write_marker(tmp_path, "git-Paper-100 (MC: 1.20.1)")

    record = read_local_version(path)

    assert record == LocalVersionRecord(server_type="Paper", mc_version="1.20.1", build=100)


def test_read_local_version_keeps_other_fields(tmp_path):
    path = tmp_path / "version_history.json"
    path.write_text(json.dumps({
        "oldVersion": "git-Paper-99 (MC: 1.20.1)",
        "currentVersion": "git-Paper-101 (MC: 1.20.1)",
    }))

    assert read_local_version(path).build == 101
    assert read_version_history(path)["oldVersion"] == "git-Paper-99 (MC: 1.20.1)"


def test_missing_file_is_absent(tmp_path):
    assert read_local_version(tmp_path / "version_history.json") is None


@pytest.mark.parametrize("content", [
    "",
    "not json",
    "[1, 2, 3]",
    '{"oldVersion": "git-Paper-99 (MC: 1.20.1)"}',
    '{"currentVersion": 100}',
    '{"currentVersion": "garbage"}',
])
def test_malformed_file_is_absent(tmp_path, content):
    path = tmp_path / "version_history.json"
    path.write_text(content)

    assert read_local_version(path) is None


def test_default_substituted_when_absent(tmp_path):
    record = read_local_version_or_default(tmp_path / "version_history.json")

    assert record == LocalVersionRecord.default()
    assert record.build == 0
    assert record.is_empty


def test_read_version_history_missing_raises(tmp_path):
    with pytest.raises(LocalStateUnavailable):
        read_version_history(tmp_path / "nope.json")


def test_injected_logger_receives_messages(tmp_path):
    messages = []

    class Recorder:
        def info(self, msg):
            messages.append(("info", msg))

        def warning(self, msg):
            messages.append(("warning", msg))

    path = tmp_path / "version_history.json"
    path.write_text("{}")

    assert read_local_version(path, Recorder()) is None
    assert any(level == "warning" for level, _ in messages)
