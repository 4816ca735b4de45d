"""
Logging setup for hosts embedding the engine.

Engine modules only create module loggers and attach context through
``extra={...}`` (sender_domain, outcome, detection counts). configure_logging()
renders that context either as JSON lines or as trailing key=value pairs.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional

from subtracker.config import settings

# Attributes every LogRecord has; anything else on a record came from extra=.
_RESERVED = set(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {'message', 'asctime'}

CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {key: value for key, value in vars(record).items() if key not in _RESERVED}


class JSONFormatter(logging.Formatter):
    """One JSON object per record; extra= context becomes top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_extra_fields(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Plain text line with extra= context appended as key=value pairs."""

    def __init__(self):
        super().__init__(CONSOLE_FORMAT, datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        extra = _extra_fields(record)
        if not extra:
            return text
        # Context stays on the first line, ahead of any traceback
        head, newline, rest = text.partition("\n")
        pairs = " ".join(f"{key}={value}" for key, value in sorted(extra.items()))
        return f"{head} {pairs}{newline}{rest}"


def configure_logging(level: Optional[str] = None, json_output: bool = False) -> logging.Logger:
    """
    Install a single stream handler on the root logger.

    Args:
        level: Level name (default: settings.LOG_LEVEL)
        json_output: JSON lines instead of console format

    Returns:
        The root logger
    """
    if level is None:
        level = settings.LOG_LEVEL

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else ConsoleFormatter())
    root.addHandler(handler)
    return root
