from __future__ import annotations

import logging
import sys

import orjson

from tests.triggerflow.conftest import Model
from triggerflow.api.logging import LOGGER_NAMES, LoggingConfig
from triggerflow.runtime.logging import JsonFormatter, configure_logging, setup_logging, shutdown_logging
from triggerflow.runtime.machine import Machine


def test_setup_logging_adds_handler_when_missing(monkeypatch) -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        root.handlers.clear()
        root.setLevel(logging.NOTSET)
        monkeypatch.setenv("TRIGGERFLOW_LOG_LEVEL", "DEBUG")
        monkeypatch.delenv("TRIGGERFLOW_LOG_FILE", raising=False)
        setup_logging()
        assert root.handlers
        assert root.level == logging.DEBUG
    finally:
        root.handlers.clear()
        root.handlers.extend(original_handlers)
        root.setLevel(original_level)


def test_setup_logging_does_not_override_existing_handlers() -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    sentinel = logging.NullHandler()
    try:
        root.handlers.clear()
        root.addHandler(sentinel)
        root.setLevel(logging.WARNING)
        setup_logging()
        assert root.handlers == [sentinel]
        assert root.level == logging.WARNING
    finally:
        root.handlers.clear()
        root.handlers.extend(original_handlers)
        root.setLevel(original_level)


def test_configure_logging_streams_json_lines_to_file(tmp_path) -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    log_path = tmp_path / "nested" / "machine.jsonl"
    try:
        configure_logging(LoggingConfig(level_name="INFO", file_path=str(log_path)))
        logging.getLogger("triggerflow.machine").info("door: fired %s", "open", extra={"model": 7})
        shutdown_logging()

        lines = log_path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        payload = orjson.loads(lines[0])
        assert payload["level"] == "INFO"
        assert payload["logger"] == "triggerflow.machine"
        assert payload["msg"] == "door: fired open"
        assert payload["fields"] == {"model": 7}
    finally:
        shutdown_logging()
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()
        root.handlers.extend(original_handlers)
        root.setLevel(original_level)


def test_json_formatter_includes_exception_text() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        exc_info = sys.exc_info()
    record = logging.LogRecord("triggerflow.event", logging.ERROR, __file__, 1, "failed", (), exc_info)
    payload = orjson.loads(JsonFormatter().format(record))
    assert payload["msg"] == "failed"
    assert "RuntimeError: boom" in payload["exc_info"]
    assert "fields" not in payload


def test_transition_logging_uses_machine_name_prefix(caplog) -> None:
    model = Model()
    machine = Machine(model=model, states=["A", "B"], initial="A", name="door")
    with caplog.at_level(logging.INFO, logger="triggerflow"):
        machine.trigger(model, "to_B")
    messages = [record.getMessage() for record in caplog.records]
    assert any(msg.startswith("door: ") and "B" in msg for msg in messages)
    assert {record.name for record in caplog.records} <= set(LOGGER_NAMES)
