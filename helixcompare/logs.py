# helixcompare/logs.py
"""
Logging setup for CLI runs: stderr plus a best-effort rotating file log.

Library modules only call `logging.getLogger(__name__)`; nothing is configured
until an entry point calls `configure_logging()`.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

LOGGER_NAME = "helixcompare"
LOG_PATH = os.path.join("logs", "helixcompare.log")
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
LOG_DATEFMT = "(%Y-%m-%d %H:%M:%S)"

_SECRET_ENV_KEYS = ("AIRTABLE_TOKEN",)


def debug_enabled() -> bool:
    return os.getenv("HELIX_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


class _RedactSecrets(logging.Filter):
    """Replace secret env values that leak into messages (e.g. echoed request headers)."""

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        redacted = msg
        for k in _SECRET_ENV_KEYS:
            val = os.getenv(k)
            if val:
                redacted = redacted.replace(val, "[REDACTED]")
        if redacted != msg:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(*, log_path: str | None = LOG_PATH, level: int | None = None) -> logging.Logger:
    """Create/reuse the package logger. Safe to call more than once."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level if level is not None else (logging.DEBUG if debug_enabled() else logging.INFO))

    # Avoid duplicate handlers if called again in REPL/tests
    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    redact = _RedactSecrets()

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(formatter)
    stream.addFilter(redact)
    logger.addHandler(stream)

    if log_path:
        try:
            os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)
            handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        except OSError:
            # stderr keeps working without the file log
            pass
        else:
            handler.setFormatter(formatter)
            handler.addFilter(redact)
            logger.addHandler(handler)

    return logger
