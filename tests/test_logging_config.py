"""configure_logging tests: stdlib backend wiring and rendering.

Tests cover:
    - JSON mode writes one JSON object per line to stderr
    - Events below the configured level are dropped
    - Console mode and unknown level names
"""

import json
import logging

import pytest
import structlog

from core.logging_config import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def _stderr_lines(capsys):
    return [line for line in capsys.readouterr().err.splitlines() if line.strip()]


def test_json_lines_on_stderr_and_debug_dropped(capsys):
    configure_logging("INFO", json=True)
    log = structlog.get_logger("bus.tests")

    log.debug("hidden_event")
    log.info("projects_listed", count=3)
    log.warning("slow_page", page=2)

    lines = _stderr_lines(capsys)
    events = [json.loads(line) for line in lines]

    assert [e["event"] for e in events] == ["projects_listed", "slow_page"]
    assert events[0]["count"] == 3
    assert events[0]["level"] == "info"
    assert events[0]["logger"] == "bus.tests"
    assert "timestamp" in events[0]
    assert events[1]["level"] == "warning"


def test_json_exception_is_rendered_as_text(capsys):
    configure_logging("INFO", json=True)
    log = structlog.get_logger("bus.tests")

    try:
        raise RuntimeError("boom")
    except RuntimeError:
        log.exception("request_failed")

    event = json.loads(_stderr_lines(capsys)[0])
    assert event["event"] == "request_failed"
    assert "RuntimeError: boom" in event["exception"]


def test_unknown_level_falls_back_to_warning(capsys):
    configure_logging("chatty", json=True)
    log = structlog.get_logger("bus.tests")

    log.info("dropped")
    log.warning("kept")

    events = [json.loads(line)["event"] for line in _stderr_lines(capsys)]
    assert events == ["kept"]


def test_console_mode_is_not_json(capsys):
    configure_logging("DEBUG")
    structlog.get_logger("bus.tests").debug("cache_miss", key="projects")

    lines = _stderr_lines(capsys)
    assert len(lines) == 1
    assert "cache_miss" in lines[0]
    assert "projects" in lines[0]
    with pytest.raises(ValueError):
        json.loads(lines[0])
