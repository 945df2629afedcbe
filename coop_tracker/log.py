"""Logging setup for pulls, stdlib only.

Everything runs at ``LOG_LEVEL``, except the ``coop_tracker`` loggers, which
always emit DEBUG into a dated file under ``logs/`` (or
``COOP_TRACKER_LOG_DIR``). Per-table drop counts end up there. The console
stays at ``LOG_LEVEL``.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

_DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
# Libraries that are chatty at DEBUG and drown out pull diagnostics.
_NOISY_LOGGERS = ("urllib3", "MARKDOWN", "charset_normalizer")
_PACKAGE = "coop_tracker"
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; configures root handlers on first call."""
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def log_file_path(now: datetime | None = None) -> Path:
    log_dir = Path(os.environ.get("COOP_TRACKER_LOG_DIR") or _DEFAULT_LOG_DIR)
    return log_dir / f"pull_{(now or datetime.now()).strftime('%Y-%m-%d')}.log"


def _configure() -> None:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root = logging.getLogger()
    root.setLevel(level)
    logging.getLogger(_PACKAGE).setLevel(logging.DEBUG)

    if root.handlers:
        return

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    try:
        path = log_file_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        root.addHandler(fh)
    except OSError:
        pass
