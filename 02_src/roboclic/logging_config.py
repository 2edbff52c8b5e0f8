"""Structured logging configuration for Roboclic."""

import json
import logging
import logging.config
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path
from typing import IO

from .config import DEFAULT_LOG_PATH

# Fields a call can attach with `extra=`, copied into the JSON line when set
EXTRA_FIELDS = ("chat_id", "command")

# Third-party loggers too chatty at the bot's level
LIBRARY_LEVELS = {
    "httpx": "WARNING",  # one line per Bot API request
    "telegram": "INFO",
    "aiosqlite": "INFO",
}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, non-ASCII kept as is."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        entry.update(
            {key: getattr(record, key) for key in EXTRA_FIELDS if hasattr(record, key)}
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(
    log_level: str = "INFO",
    log_file: str | Path | None = DEFAULT_LOG_PATH,
    stream: IO[str] | None = None,
) -> None:
    """
    Route every logger to JSON lines on the console and in a rotating file.

    Args:
        log_level: Root level, usually Settings.log_level.
        log_file: Rotating log file (10 MB x 5). None logs to the console only.
        stream: Console stream, stdout by default.
    """
    handlers: dict[str, dict] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": stream if stream is not None else "ext://sys.stdout",
        },
    }
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": str(log_file),
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "formatter": "json",
            "encoding": "utf-8",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"json": {"()": JSONFormatter}},
            "handlers": handlers,
            "loggers": {name: {"level": level} for name, level in LIBRARY_LEVELS.items()},
            "root": {"level": log_level.upper(), "handlers": list(handlers)},
        }
    )


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, typically get_logger(__name__)."""
    return logging.getLogger(name)
