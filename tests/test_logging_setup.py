import logging

import pytest

from csvrecord.domain.record import CsvRecord
from csvrecord.infra.logging.setup import CommandLog, mapLogLevel


def test_map_log_level():
    assert mapLogLevel("warn") == logging.WARNING
    assert mapLogLevel(" DEBUG ") == logging.DEBUG
    with pytest.raises(ValueError):
        mapLogLevel("TRACE")
    with pytest.raises(ValueError):
        mapLogLevel(None)


def test_command_log_writes_record_context(tmp_path):
    record = CsvRecord(values=["a"], mapping={"x": 0, "y": 1}, record_number=3, character_position=42)

    log = CommandLog("check", str(tmp_path), "run-7", "INFO")
    try:
        log.event(logging.WARNING, "check", "record is inconsistent", record=record)
        log.event(logging.INFO, "report", "done")
        log.logger.info("plain message")
        log.event(logging.DEBUG, "check", "hidden")
    finally:
        log.close()

    text = (tmp_path / "check_run-7.log").read_text(encoding="utf-8")
    assert log.path.endswith("check_run-7.log")
    assert "WARNING runId=run-7 comp=check record=3 pos=42 msg=record is inconsistent" in text
    assert "comp=report record=- pos=- msg=done" in text
    assert "comp=core record=- pos=- msg=plain message" in text
    assert "hidden" not in text


def test_command_log_close_releases_handlers(tmp_path):
    log = CommandLog("export", str(tmp_path / "nested"), "run-8", "DEBUG")
    log.event(logging.DEBUG, "export", "visible at debug")
    log.close()

    assert log.logger.handlers == []
    assert "msg=visible at debug" in (tmp_path / "nested" / "export_run-8.log").read_text(encoding="utf-8")
