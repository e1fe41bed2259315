"""Logging setup shared by the API, the CLI and the Streamlit app.

Console output follows ``LOG_LEVEL``; a per-day file under ``logs/`` (or
``CVMATCH_LOG_DIR``) always records DEBUG so pipeline counts can be traced.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import date
from pathlib import Path

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"

# HTTP client chatter that drowns out pipeline milestones at DEBUG.
QUIET_LOGGERS = ("urllib3", "httpx", "httpcore", "openai")

_ready = False


def _log_dir() -> Path:
    override = os.environ.get("CVMATCH_LOG_DIR", "").strip()
    return Path(override) if override else DEFAULT_LOG_DIR


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler() -> logging.Handler | None:
    directory = _log_dir()
    try:
        directory.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(
            directory / f"cvmatch_{date.today():%Y-%m-%d}.log", encoding="utf-8"
        )
    except OSError:
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging() -> None:
    """Attach handlers to the root logger unless something else already did."""
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # uvicorn and pytest install their own handlers first.
    if root.handlers:
        root.setLevel(level)
        return

    root.addHandler(_console_handler(level))
    file_handler = _file_handler()
    if file_handler is not None:
        root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    global _ready
    if not _ready:
        setup_logging()
        _ready = True
    return logging.getLogger(name)
