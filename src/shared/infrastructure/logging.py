"""
Structured Logging
==================

JSON-structured logging with Keptn context tracking.

Provides:
- Structured JSON logs (parseable by log aggregators)
- keptn_context / event_id on every line logged for an event
- Contextual loggers for modules
- Performance timing utilities

Usage:
    from shared.infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.info("SLI retrieved", extra={"indicator": "throughput"})
"""

import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from pythonjsonlogger import jsonlogger

_SENSITIVE_KEYS = ("password", "secret", "access_key", "api_key", "authorization")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    Custom JSON formatter with additional fields.

    Adds:
    - timestamp in ISO format
    - service name
    - keptn_context and event_id when available
    """

    def __init__(self, *args: Any, service: str = "", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._service = service

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()

        log_record["service"] = self._service
        log_record["keptn_context"] = getattr(record, "keptn_context", "")
        log_record["event_id"] = getattr(record, "event_id", "")

        for key, value in list(log_record.items()):
            if isinstance(value, str) and any(s in key.lower() for s in _SENSITIVE_KEYS):
                log_record[key] = "***REDACTED***"


def setup_logging(
    level: str = "INFO",
    service: str = "",
) -> None:
    """
    Configure structured JSON logging for the service.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        service: Service name added to every log line
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        service=service,
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    numeric_level = logging.getLevelName(level.strip().upper())
    if isinstance(numeric_level, int):
        root_logger.setLevel(numeric_level)
    else:
        root_logger.setLevel(logging.INFO)
        root_logger.error(
            "could not parse log level provided by 'LOG_LEVEL' env var",
            extra={"log_level": level}
        )

    # Silence noisy loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        logging.Logger: Configured logger instance
    """
    return logging.getLogger(name)


def get_context_logger(
    name: str,
    keptn_context: str | None = None,
    event_id: str | None = None,
) -> logging.Logger | logging.LoggerAdapter:
    """
    Get a logger that stamps keptn_context and event_id on every record.

    Args:
        name: Logger name
        keptn_context: Keptn context of the event being handled
        event_id: CloudEvent id of the event being handled

    Returns:
        Logger, or LoggerAdapter carrying the event identifiers in extra
    """
    logger = get_logger(name)
    extra = {}
    if keptn_context:
        extra["keptn_context"] = keptn_context
    if event_id:
        extra["event_id"] = event_id
    if extra:
        return _MergingLoggerAdapter(logger, extra)
    return logger


class _MergingLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that keeps per-call extra instead of replacing it."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


@contextmanager
def log_latency(logger: logging.Logger | logging.LoggerAdapter, operation: str, **extra_context: Any):
    """
    Context manager for measuring and logging operation latency.

    Usage:
        with log_latency(logger, "metrics_query", row_id="A"):
            response = await client.post(url, json=body)

    Args:
        logger: Logger instance
        operation: Operation name for logging
        **extra_context: Additional context to include in log
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{operation} completed",
            extra={
                "operation": operation,
                "latency_ms": round(latency_ms, 2),
                **extra_context,
            },
        )
