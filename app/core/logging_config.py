"""Logging configuration.

Configures the root logger from ``settings.log_level`` / ``settings.log_format``
and carries the current request ID into every record.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import UTC, datetime

from app.core.config import LogFormatEnum, settings

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

SIMPLE_FORMAT = "%(asctime)s %(levelname)-8s [%(request_id)s] %(name)s: %(message)s"


class RequestIdFilter(logging.Filter):
    """Attach the current request ID to each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """Formats log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(level: str | None = None, log_format: LogFormatEnum | None = None) -> None:
    """Configure the root logger. Safe to call more than once."""
    level = level or settings.log_level.value
    log_format = log_format or settings.log_format

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    if log_format == LogFormatEnum.json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # SQLAlchemy echoes through its own logger when debug is on
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )
