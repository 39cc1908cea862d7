"""Logging configuration for zap.

The terminal belongs to the TUI, so everything goes to a single log file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _AppOnlyFilter(logging.Filter):
    """Keep zap logs at the configured level; third-party noise only at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "zap" or record.name.startswith("zap."):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(log_file: Union[str, Path], level: Union[int, str] = logging.INFO) -> Path:
    """
    Route all logging to ``log_file``.

    Call this once, before the first log call. Returns the resolved log path.
    """
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    fh = logging.FileHandler(str(path), encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    fh.addFilter(_AppOnlyFilter())
    root.addHandler(fh)

    logging.captureWarnings(True)
    logging.getLogger("zap").debug("Logging to %s", path)
    return path
