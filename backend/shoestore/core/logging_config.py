"""
Logging setup for the Shoe Store API.

Every record carries the id of the request being served. Production writes one
JSON object per line for CloudWatch; other environments get plain text.
"""

import sys
import logging
import json
from datetime import datetime, timezone
from typing import Optional, Any
from contextvars import ContextVar

from shoestore.core.config import settings

__all__ = [
    "setup_logging",
    "get_logger",
    "set_request_id",
    "get_request_id",
    "log_with_context",
    "RequestIdFilter",
    "JsonFormatter",
]

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(request_id)s] %(name)s: %(message)s"

# Attributes every LogRecord has; anything else came in through `extra`
_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "request_id", "taskName"}


def set_request_id(request_id: Optional[str]) -> None:
    request_id_var.set(request_id)


def get_request_id() -> Optional[str]:
    return request_id_var.get()


class RequestIdFilter(logging.Filter):
    """Stamps the current request id onto each record ("-" outside a request)"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with `extra` fields merged in at top level"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "message": record.getMessage(),
        }
        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in _RECORD_FIELDS and not key.startswith("_")
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Install a single stdout handler on the root logger.

    `level` and `log_format` ("json" or "text") default to LOG_LEVEL and
    LOG_FORMAT, then to INFO/json in production and DEBUG/text elsewhere.
    """
    level = (level or settings.LOG_LEVEL or ("INFO" if settings.is_production else "DEBUG")).upper()
    log_format = (log_format or settings.LOG_FORMAT or ("json" if settings.is_production else "text")).lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(JsonFormatter() if log_format == "json" else logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    # Lambda installs its own root handler before our code runs
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))

    for name in ("uvicorn.access", "boto3", "botocore", "urllib3", "stripe"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(f"Logging ready: level={level} format={log_format}")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: int, message: str, **extra: Any) -> None:
    logger.log(level, message, extra=extra)
