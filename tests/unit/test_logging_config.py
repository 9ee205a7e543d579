"""Tests for logging setup and formatters."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from modeinjector.logging_config import (
    LOG_FILE,
    ROOT_LOGGER,
    ConsoleFormatter,
    JSONLFormatter,
    setup_logging,
)


def _record(level: int, message: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="modeinjector.core.linker",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


class TestFormatters:
    def test_jsonl_fields(self):
        entry = json.loads(JSONLFormatter().format(_record(logging.INFO, "Linked 3 aliases")))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "modeinjector.core.linker"
        assert entry["message"] == "Linked 3 aliases"
        assert entry["timestamp"].endswith("Z")
        assert "source" not in entry

    def test_jsonl_warning_has_source(self):
        entry = json.loads(JSONLFormatter().format(_record(logging.WARNING, "unresolved")))
        assert entry["source"]["line"] == 10

    def test_console_hides_info_level(self):
        formatter = ConsoleFormatter()
        assert "INFO" not in formatter.format(_record(logging.INFO, "hello"))
        assert "WARNING" in formatter.format(_record(logging.WARNING, "careful"))


class TestSetupLogging:
    def test_console_only(self):
        logger = setup_logging("debug")
        assert logger.name == ROOT_LOGGER
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_repeated_setup_replaces_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_unknown_level_falls_back_to_info(self):
        assert setup_logging("chatty").level == logging.INFO

    def test_file_output(self, tmp_path: Path):
        log_dir = tmp_path / "logs"
        logger = setup_logging(logging.INFO, log_dir)
        logging.getLogger("modeinjector.core.batch").info("Processing %d collections", 2)
        for handler in logger.handlers:
            handler.flush()

        lines = (log_dir / LOG_FILE).read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["message"] == "Processing 2 collections"
