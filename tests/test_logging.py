"""Tests for logging configuration and emitted events."""

from __future__ import annotations

import json
import logging

import pytest
from structlog.testing import capture_logs

from diffparse.filenames import decode_filename
from diffparse.logging import (
    LOG_FORMAT_ENV,
    LOG_LEVEL_ENV,
    configure_logging,
    resolve_log_settings,
)
from diffparse.parser import parse_diff


def test_resolve_log_settings_uses_configured_values() -> None:
    assert resolve_log_settings("info", "JSON") == ("INFO", "json")


def test_resolve_log_settings_prefers_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
    monkeypatch.setenv(LOG_FORMAT_ENV, "json")
    assert resolve_log_settings("ERROR", "console") == ("DEBUG", "json")


def test_resolve_log_settings_falls_back_on_invalid_values(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")
    monkeypatch.setenv(LOG_FORMAT_ENV, "xml")
    assert resolve_log_settings("INFO", "json") == ("WARNING", "console")


def test_configure_logging_sets_root_level_from_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "ERROR")
    configure_logging("DEBUG", "console")
    assert logging.getLogger().level == logging.ERROR


def test_configure_logging_json_writes_parse_event_to_stderr(
    capsys: pytest.CaptureFixture[str],
) -> None:
    configure_logging("DEBUG", "json")
    parse_diff("--- a/x\n+++ b/x\n@@ -1 +1 @@\n-a\n+b\n")

    captured = capsys.readouterr()
    assert captured.out == ""
    record = json.loads(captured.err.strip().splitlines()[-1])
    assert record["event"] == "diff.parsed"
    assert record["level"] == "debug"
    assert (record["files"], record["additions"], record["deletions"]) == (1, 1, 1)


def test_configure_logging_filters_debug_at_warning(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("WARNING", "console")
    parse_diff("--- a/x\n+++ b/x\n@@ -1 +1 @@\n-a\n+b\n")
    assert "diff.parsed" not in capsys.readouterr().err


def test_parse_emits_debug_event_with_counts() -> None:
    with capture_logs() as logs:
        parse_diff("diff --git a/x b/x\n--- a/x\n+++ b/x\n@@ -1,2 +1,2 @@\n a\n-b\n+c\n")

    events = [entry for entry in logs if entry["event"] == "diff.parsed"]
    assert len(events) == 1
    assert events[0]["log_level"] == "debug"
    assert events[0]["files"] == 1
    assert events[0]["lines"] == 8


def test_decode_failure_logs_warning() -> None:
    with capture_logs() as logs:
        assert decode_filename('"a/broken\\q"') == '"a/broken\\q"'
        assert decode_filename('"a/unterminated') == '"a/unterminated'

    warnings = [entry for entry in logs if entry["event"] == "filename_decode_failed"]
    assert [entry["token"] for entry in warnings] == ['"a/broken\\q"', '"a/unterminated']
    assert all(entry["log_level"] == "warning" for entry in warnings)
    assert warnings[1]["error"] == "unterminated quote"


def test_successful_decode_logs_nothing() -> None:
    with capture_logs() as logs:
        assert decode_filename('"a/caf\\303\\251.txt"') == "café.txt"
    assert logs == []
