"""Logger setup shared by the pipeline stages and the srcxref CLI.

Every stage asks for ``get_logger("<stage>")`` and logs per-file work
(parsing, transforming, index pages) at DEBUG and run milestones at INFO.
Only the CLI calls :func:`configure_logging`; library callers keep the
standard propagation to their own handlers.
"""

from __future__ import annotations

import logging
from pathlib import Path

_ROOT = "srcxref"
_CONSOLE_FORMAT = "[srcxref] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(stage: str | None = None) -> logging.Logger:
    """Logger for one stage, e.g. ``get_logger("highlight.transform")``."""
    return logging.getLogger(f"{_ROOT}.{stage}" if stage else _ROOT)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send srcxref records to stderr and, when given, to ``log_file``.

    ``verbose`` lowers the threshold to DEBUG so each scanned and
    transformed file is listed. Calling this again replaces the handlers
    installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(level)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(sink)

    return logger


__all__ = ["configure_logging", "get_logger"]
