"""Logging configuration for running the service."""

from __future__ import annotations

import logging
import sys


class _ServiceLogFilter(logging.Filter):
    """Keep service logs; let third parties through only at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("todo_service"):
            return True
        if record.name.startswith("uvicorn"):
            return record.levelno >= logging.INFO
        return record.levelno >= logging.WARNING


def setup_logging(level: int = logging.INFO) -> None:
    """Install a single stderr handler on the root logger.

    Call once, before the server starts.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.addFilter(_ServiceLogFilter())
    root.addHandler(handler)

    logging.captureWarnings(True)
