"""Log output for shiksha-wallet.

Everything goes to stdout through one handler on the root logger.
LOG_JSON picks the line format:

  plain (default): ``<time> <LEVEL> <logger>  <message>``.  Warnings and
    errors are suffixed with ``[file:line]``.

  JSON: one object per line.  Whatever the request middleware and the
    credential services attach through ``extra=`` (request_id, path,
    credential_id, student_id, ...) is lifted to a top-level key, so the
    history of one credential can be pulled out by field.

Passwords, access tokens and signature tokens are never logged;
tests/api/test_log_secrets.py checks this.
"""

from __future__ import annotations

import json
import logging
import sys

_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# Library loggers held at WARNING or above whatever level the app runs at.
_CHATTY_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "httpcore", "httpx")


def _with_millis(formatted: str, record: logging.LogRecord) -> str:
    # strftime has no milliseconds; splice them in ahead of the +HHMM offset.
    stamp, offset = formatted[:-5], formatted[-5:]
    return f"{stamp}.{int(record.msecs):03d}{offset}"


class _ContainerFormatter(logging.Formatter):
    """Plain one-line records; WARNING and up also name the source line."""

    _BASE_FMT = "%(asctime)s %(levelname)-8s %(name)s  %(message)s"
    _LOC_SUFFIX = "  [%(filename)s:%(lineno)d]"

    def __init__(self) -> None:
        super().__init__(self._BASE_FMT, datefmt=_DATEFMT)
        self._plain = self._style
        self._located = logging.PercentStyle(self._BASE_FMT + self._LOC_SUFFIX)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        return _with_millis(super().formatTime(record, datefmt or _DATEFMT), record)

    def format(self, record: logging.LogRecord) -> str:
        self._style = self._located if record.levelno >= logging.WARNING else self._plain
        return super().format(record)


class _JsonFormatter(logging.Formatter):
    # Optional record attributes copied into the object when set.
    _CONTEXT_FIELDS = (
        "request_id",
        "method",
        "path",
        "user_id",
        "status_code",
        "duration_ms",
        "credential_id",
        "student_id",
    )

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        return _with_millis(super().formatTime(record, datefmt or _DATEFMT), record)

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key in self._CONTEXT_FIELDS
            if (value := getattr(record, key, None)) is not None
        )
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(level_name: str, *, json_format: bool = False) -> None:
    """Replace the root logger's handlers with a single stdout handler.

    An unrecognised ``level_name`` means INFO.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JsonFormatter() if json_format else _ContainerFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
