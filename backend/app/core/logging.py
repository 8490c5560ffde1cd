"""JSON log lines for the API and the maintenance scripts."""

import logging
import sys
from contextvars import ContextVar
from typing import Any

from pythonjsonlogger import jsonlogger

from app.core.config import settings

# Set by RequestIDMiddleware for the duration of a request
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

# Loggers capped above the root level; requests are already logged by the middleware
NOISY_LOGGERS: dict[str, int] = {
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
}


class ProviquizJsonFormatter(jsonlogger.JsonFormatter):
    """One JSON object per record: ts, level, logger, event, env, request_id and any ``extra``."""

    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.pop("message", None)
        log_record["ts"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["event"] = record.getMessage()
        log_record["env"] = settings.ENV
        request_id = request_id_ctx.get()
        if request_id and "request_id" not in log_record:
            log_record["request_id"] = request_id


def setup_logging(level: str | None = None) -> None:
    """Send every logger through a single stdout handler. Calling it again replaces the handler."""
    level_name = (level or settings.LOG_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(logging.getLevelNamesMapping().get(level_name, logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ProviquizJsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z"))
    root.handlers[:] = [handler]

    for name, cap in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(cap)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
