"""Tests for perch.utils.logging module."""

from __future__ import annotations

import json
import logging

import structlog

from perch.utils.logging import build_formatter, configure_logging, get_logger


def _record(name: str, msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord(name, logging.WARNING, __file__, 1, msg, args, None)


def test_configure_logging_default_settings_do_not_error() -> None:
    configure_logging()


def test_configure_logging_json_does_not_error() -> None:
    configure_logging(level="INFO", log_format="json")


def test_get_logger_returns_logger_proxy() -> None:
    configure_logging(level="DEBUG", log_format="console")
    logger = get_logger("test.module")
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")


def test_json_formatter_renders_library_records() -> None:
    formatter = build_formatter("json")
    record = _record("perch.anchored", "%s: overflows on %s", "wide", "x")

    data = json.loads(formatter.format(record))

    assert data["event"] == "wide: overflows on x"
    assert data["logger"] == "perch.anchored"
    assert data["level"] == "warning"
    assert "timestamp" in data
    assert "_record" not in data


def test_console_formatter_renders_library_records() -> None:
    formatter = build_formatter("console")
    rendered = formatter.format(_record("perch.lifecycle.state", "tooltip: hidden"))
    assert "tooltip: hidden" in rendered
    assert "perch.lifecycle.state" in rendered


def test_bound_fields_reach_processors() -> None:
    with structlog.testing.capture_logs() as logs:
        get_logger("test.bound").bind(overlay_id="overlay-9").info("shown", side="top")
    assert logs == [
        {
            "event": "shown",
            "side": "top",
            "overlay_id": "overlay-9",
            "log_level": "info",
        }
    ]
