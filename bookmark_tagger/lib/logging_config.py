"""JSON logging for the tagger.

Each record is written as one JSON object to stderr, leaving stdout to the
CLI's own output. Fields passed to ``log_with_context`` appear at the top
level of the object, and a correlation id ties together every record
emitted during one tagging run.
"""

import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

SERVICE_NAME = "bookmark-tagger"

# Prefix marking fields added through log_with_context
CONTEXT_PREFIX = "extra_"

# Client libraries that log every HTTP exchange at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "anthropic", "openai", "nltk")

# JSON key -> LogRecord attribute
_SOURCE_FIELDS = (
    ("logger", "name"),
    ("module", "module"),
    ("function", "funcName"),
    ("line", "lineno"),
)


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def context_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields attached by ``log_with_context``, without their prefix."""
    return {
        key[len(CONTEXT_PREFIX):]: value
        for key, value in vars(record).items()
        if key.startswith(CONTEXT_PREFIX)
    }


class StructuredFormatter(logging.Formatter):
    """Renders a record as a single JSON line."""

    def __init__(self, service_name: str = SERVICE_NAME):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": _utc_timestamp(record.created),
            "level": record.levelname,
            "service": self.service_name,
            "message": record.getMessage(),
        }
        entry.update({key: getattr(record, attr) for key, attr in _SOURCE_FIELDS})

        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id:
            entry["correlation_id"] = correlation_id

        entry.update(context_fields(record))

        if record.exc_info and record.exc_info[0]:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str)


class CorrelationFilter(logging.Filter):
    """Stamps records with the id of the tagging run in progress."""

    def __init__(self):
        super().__init__()
        self.correlation_id: Optional[str] = None

    def new_run(self) -> str:
        """Start a run under a fresh id and return the id."""
        self.correlation_id = uuid.uuid4().hex[:12]
        return self.correlation_id

    def set_correlation_id(self, correlation_id: Optional[str]):
        self.correlation_id = correlation_id

    def filter(self, record: logging.LogRecord) -> bool:
        if self.correlation_id and not getattr(record, "correlation_id", None):
            record.correlation_id = self.correlation_id
        return True


def setup_logging(
    service_name: str = SERVICE_NAME,
    level: str = "INFO",
    stream: Optional[TextIO] = None,
) -> CorrelationFilter:
    """Route all logging through a JSON handler.

    Args:
        service_name: Value of the ``service`` field
        level: Root log level name; unknown names fall back to INFO
        stream: Destination (defaults to stderr)

    Returns:
        The handler's CorrelationFilter, for starting runs
    """
    correlation = CorrelationFilter()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter(service_name))
    handler.addFilter(correlation)

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers[:] = [handler]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return correlation


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    correlation_id: Optional[str] = None,
    **fields: Any,
):
    """Log ``message`` with structured fields.

    Example:
        log_with_context(logger, "info", "Draft tags generated", tags=["react"])
    """
    extra: Dict[str, Any] = {f"{CONTEXT_PREFIX}{key}": value for key, value in fields.items()}
    if correlation_id:
        extra["correlation_id"] = correlation_id

    getattr(logger, level.lower())(message, extra=extra)
