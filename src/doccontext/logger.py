"""Build stdlib loggers from LoggerConfig."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from doccontext.config.schema import LogFormat, LoggerConfig, LogLevel, LogOutput

_LEVELS: dict[LogLevel, int] = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.DISABLED: logging.CRITICAL + 10,
}

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Attributes every LogRecord carries; anything else came in through extra=
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, including any extra= fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED:
                payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def create_logger(name: str, config: LoggerConfig) -> logging.Logger:
    """Configure and return the logger called name.

    The logger gets exactly one handler built from config and stops
    propagating, so repeated calls with the same name reconfigure it instead of
    stacking handlers.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    output = LogOutput.DISCARD if config.level == LogLevel.DISABLED else config.output
    handler: logging.Handler
    if output == LogOutput.DISCARD:
        handler = logging.NullHandler()
    elif output == LogOutput.STDOUT:
        handler = logging.StreamHandler(sys.stdout)
    else:
        handler = logging.StreamHandler(sys.stderr)

    if config.format == LogFormat.JSON:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(_LEVELS[config.level])
    logger.propagate = False
    return logger
