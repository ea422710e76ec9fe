"""
Structured Logging: JSON or plain-text log output with request correlation.

Every module logs through ``logging.getLogger(__name__)``. ``setup_logging``
installs one handler on the ``workflow_helper`` logger; the request-id
middleware stores a correlation id in ``request_id_var`` so each line
emitted while serving a request can be traced back to it.
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict

# Context variable for request correlation
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

ROOT_LOGGER = "workflow_helper"
PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(request_id)s%(message)s"


class RequestContextFilter(logging.Filter):
    """Attach the current request id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        req_id = request_id_var.get("")
        record.request_id = f"({req_id}) " if req_id else ""
        return True


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        req_id = request_id_var.get("")
        if req_id:
            log_entry["request_id"] = req_id

        # Add extra fields
        extra = getattr(record, "extra_data", None)
        if extra:
            log_entry["data"] = extra

        # Add exception info
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", json_output: bool = False) -> logging.Logger:
    """Configure the package logger. Safe to call more than once."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, "_workflow_helper", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler._workflow_helper = True
    handler.addFilter(RequestContextFilter())
    if json_output:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    logger.addHandler(handler)
    return logger


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())[:12]
