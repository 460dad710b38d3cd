"""
Logging configuration for the question generation service.
"""
import json
import logging
import logging.config
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for production logging.

    Produces one JSON object per line for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_entry: Dict[str, Any] = {
            "timestamp": timestamp.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "provider"):
            log_entry["provider"] = record.provider

        # Add source location for error-level logs
        if record.levelno >= logging.ERROR:
            log_entry["source"] = f"{record.pathname}:{record.lineno}"

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_file_logging: bool = False,
    json_format: bool = False,
) -> None:
    """
    Configure logging for the ``assessment_gen`` package.

    Args:
        log_level: Level name (DEBUG, INFO, ...); unknown names fall back to INFO
        log_file: Path of the rotating log file
        enable_file_logging: Also write logs to ``log_file``
        json_format: Emit JSON lines instead of the human-readable format
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "json" if json_format else "default",
            # stdout is reserved for command output
            "stream": sys.stderr,
        },
    }
    if enable_file_logging and log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "json",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "encoding": "utf-8",
        }

    logging_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": JSONFormatter,
            },
        },
        "handlers": handlers,
        "loggers": {
            "assessment_gen": {
                "level": level,
                "handlers": list(handlers),
                "propagate": False,
            },
            # Quiet down SDK request logging
            "httpx": {"level": logging.WARNING},
            "openai": {"level": logging.WARNING},
            "anthropic": {"level": logging.WARNING},
        },
    }

    logging.config.dictConfig(logging_config)
