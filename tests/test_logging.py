"""Tests for srcxref.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from srcxref.logging import configure_logging, get_logger


def test_stage_loggers_live_under_srcxref() -> None:
    assert get_logger().name == "srcxref"
    assert get_logger("highlight.transform").name == "srcxref.highlight.transform"


def test_configure_logging_writes_log_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "xref.log"

    logger = configure_logging(verbose=True, log_file=log_file)
    get_logger("symbols").debug("Scanning %s", "src/main/java")
    for handler in logger.handlers:
        handler.flush()

    assert logger.level == logging.DEBUG
    assert "DEBUG srcxref.symbols: Scanning src/main/java" in log_file.read_text(encoding="utf-8")


def test_configure_logging_replaces_previous_handlers(tmp_path: Path) -> None:
    configure_logging(log_file=tmp_path / "first.log")
    logger = configure_logging()

    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert not logger.propagate
