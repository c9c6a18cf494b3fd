"""Tests for the per-start log file."""

import logging
from datetime import datetime

from sensor_ingest.logging_setup import configure_logging, log_file_path


def test_log_file_named_after_start_time(tmp_path):
    path = log_file_path(tmp_path, datetime(2026, 10, 19, 14, 3, 22))

    assert path == tmp_path / "2026-10-19_14-03-22.log"


def test_configure_logging_routes_records_to_file(tmp_path, restore_logging):
    log_dir = tmp_path / "logs"

    path = configure_logging(log_dir, "INFO", started_at=datetime(2026, 10, 19, 14, 3, 22))
    logging.getLogger("sensor_ingest.test").info("hello from the test")
    logging.getLogger("uvicorn.error").info("uvicorn says hi")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert path.parent == log_dir
    text = path.read_text(encoding="utf-8")
    assert "INFO sensor_ingest.test: hello from the test" in text
    assert "uvicorn says hi" in text


def test_configure_logging_respects_level(tmp_path, restore_logging):
    path = configure_logging(tmp_path, "WARNING", started_at=datetime(2026, 1, 1))
    logging.getLogger("sensor_ingest.test").info("too quiet")
    logging.getLogger("sensor_ingest.test").warning("loud enough")
    for handler in logging.getLogger().handlers:
        handler.flush()

    text = path.read_text(encoding="utf-8")
    assert "too quiet" not in text
    assert "loud enough" in text
