"""
Structured logging utilities for application logging
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from .config import LoggingSettings

LOGGER_NAME = "chartscribe"

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Callers attach ids and counts with extra={"extra_data": {...}}
        extra_data = getattr(record, "extra_data", None)
        if isinstance(extra_data, dict):
            log_obj.update(extra_data)

        return json.dumps(log_obj, default=str)


def configure_logging(settings: Optional[LoggingSettings] = None) -> logging.Logger:
    """Attach a stdout handler to the application logger.

    Safe to call more than once; the handler is replaced, not duplicated.
    """
    settings = settings or LoggingSettings()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(settings.level)

    handler = logging.StreamHandler(sys.stdout)
    if settings.format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    for existing in list(logger.handlers):
        if getattr(existing, "_chartscribe_handler", False):
            logger.removeHandler(existing)
    handler._chartscribe_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
