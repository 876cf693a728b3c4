"""Structured logging for the risk overlay CLI.

Format is chosen via RISK_OVERLAY_LOG_FORMAT ("text" by default, or "json"),
verbosity via RISK_OVERLAY_LOG_LEVEL. The engine itself only logs at DEBUG.

Log calls attach context as ``risk_*`` extras (``risk_rules``,
``risk_record_index``, ...). Both formatters render that context with the
prefix stripped, so ``extra={"risk_rules": [...]}`` shows up as ``rules``.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone

PACKAGE_LOGGER = "risk_overlay"
EXTRA_PREFIX = "risk_"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def record_context(record: logging.LogRecord, prefix: str = EXTRA_PREFIX) -> dict:
    """``risk_*`` extras of a record, keyed without the prefix."""
    return {
        key[len(prefix):]: value
        for key, value in record.__dict__.items()
        if key.startswith(prefix)
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line; extras are nested under ``context``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = record_context(record)
        if context:
            payload["context"] = context

        if record.exc_info and record.exc_info[1] is not None:
            exc_type, exc, tb = record.exc_info
            payload["error"] = f"{exc_type.__name__}: {exc}"
            payload["traceback"] = "".join(traceback.format_exception(exc_type, exc, tb))

        return json.dumps(payload, default=str)


class ContextTextFormatter(logging.Formatter):
    """Plain text lines with ``key=value`` context appended."""

    def __init__(self):
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value!r}" for key, value in sorted(context.items()))
        first, sep, rest = line.partition("\n")
        return f"{first} [{pairs}]{sep}{rest}"


def resolve_level(level: int | str) -> int:
    """Accept a numeric level or a level name; unknown names fall back to WARNING."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(log_format: str, level: int | str = logging.WARNING) -> logging.Handler:
    """Route ``risk_overlay`` logs to a single stderr handler and return it.

    Only the package logger is configured; the root logger is left to the
    embedding application.
    """
    numeric_level = resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)

    for existing in logger.handlers[:]:
        logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter() if log_format == "json" else ContextTextFormatter())
    logger.addHandler(handler)
    return handler
