"""Tests for the shared logging helpers."""

import json
import logging

import pytest

from common.logging_utils import (
    HumanFormatter,
    JsonFormatter,
    Timer,
    configure_logging,
    extra_context,
    is_debug_enabled,
)
from constants import Constants


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def make_record(msg="hello", **extra):
    record = logging.LogRecord("rangepull.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_extra_context_drops_none_and_prefixes_reserved():
    payload = extra_context(event="lookup", name="clash", count=None)
    assert payload["event"] == "lookup"
    assert payload["ctx_name"] == "clash"
    assert "name" not in payload
    assert "count" not in payload
    assert payload["context_keys"] == ("event", "ctx_name")


def test_human_formatter_appends_context():
    formatter = HumanFormatter(Constants.LOG_FORMAT)
    record = make_record(**extra_context(component="selector", count=3))
    assert formatter.format(record) == "[INFO] hello [component=selector count=3]"


def test_human_formatter_plain_record():
    assert HumanFormatter(Constants.LOG_FORMAT).format(make_record()) == "[INFO] hello"


def test_json_formatter():
    record = make_record(**extra_context(event="resolve", target="g:a:jar"))
    data = json.loads(JsonFormatter().format(record))
    assert data == {
        "level": "INFO",
        "logger": "rangepull.test",
        "message": "hello",
        "event": "resolve",
        "target": "g:a:jar",
    }


def test_configure_logging_is_idempotent(restore_root, monkeypatch):
    monkeypatch.delenv(Constants.ENV_LOG_LEVEL, raising=False)
    monkeypatch.delenv(Constants.ENV_LOG_FORMAT, raising=False)
    configure_logging()
    configure_logging()

    installed = [h for h in restore_root.handlers if getattr(h, "_rangepull_handler", False)]
    assert len(installed) == 1
    assert restore_root.level == logging.INFO


def test_configure_logging_level_from_env_and_override(restore_root, monkeypatch):
    monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "debug")
    configure_logging()
    assert is_debug_enabled(logging.getLogger("rangepull.test"))

    configure_logging(level="WARNING")
    assert restore_root.level == logging.WARNING


def test_configure_logging_json_format(restore_root, monkeypatch):
    monkeypatch.setenv(Constants.ENV_LOG_FORMAT, "json")
    configure_logging()
    added = [h for h in restore_root.handlers if isinstance(h.formatter, JsonFormatter)]
    assert len(added) == 1


def test_configure_logging_file(restore_root, tmp_path):
    log_file = tmp_path / "run.log"
    configure_logging(level="INFO", log_file=str(log_file))
    logging.getLogger("rangepull.test").info("written")
    for handler in restore_root.handlers:
        handler.flush()
    assert "written" in log_file.read_text(encoding="utf-8")


def test_timer_measures_elapsed():
    timer = Timer()
    assert timer.duration_ms() == 0.0
    with timer:
        pass
    first = timer.duration_ms()
    assert first >= 0.0
    assert timer.duration_ms() == first
