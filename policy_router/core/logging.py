"""Centralized logging configuration for the ``policy_router`` package.

Only the package logger is configured; the host's root logger and its
handlers are left alone.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from policy_router.core.config import settings

PACKAGE_LOGGER = "policy_router"

# LogRecord attributes copied into JSON output when passed via ``extra=``
_ROUTING_EXTRAS = ("request_id", "virtual_model", "concrete_model")


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter for production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_data["exception"] = self.formatException(record.exc_info)
        for key in _ROUTING_EXTRAS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)
        return json.dumps(log_data, ensure_ascii=False)


def setup_logging() -> logging.Logger:
    """Attach a stdout handler to the package logger and return it.

    Safe to call repeatedly: handlers on the package logger are replaced,
    never stacked. Records stop propagating so the host does not print them
    twice.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if settings.log_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    logger.addHandler(handler)
    return logger
