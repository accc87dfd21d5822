"""Structured JSON logging utilities for event-based logging."""

import json
import logging
from datetime import datetime, timezone
from typing import Any


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add event-specific fields if present
        if hasattr(record, "event_type"):
            log_data["event_type"] = record.event_type
        if hasattr(record, "event_data"):
            log_data.update(record.event_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def _event_data(fields: dict[str, Any]) -> dict[str, Any]:
    # None values are dropped so absent context doesn't show up as null
    return {key: value for key, value in fields.items() if value is not None}


def log_sync_event(
    logger: logging.Logger,
    event: str,
    message: str | None = None,
    **kwargs: Any,
) -> None:
    """
    Log a feed synchronization event.

    Args:
        logger: Logger instance
        event: Event name (e.g., "station_sync", "status_merge", "cache_cleared")
        message: Human readable message, defaults to the event name
        **kwargs: Additional fields to include
    """
    event_data = {"event": event}
    event_data.update(_event_data(kwargs))

    extra = {
        "event_type": "sync_event",
        "event_data": event_data,
    }
    logger.info(message or f"Sync {event}", extra=extra)


def log_error(
    logger: logging.Logger,
    error_type: str,
    message: str,
    exc_info: Exception | None = None,
    **kwargs: Any,
) -> None:
    """
    Log an error event.

    Args:
        logger: Logger instance
        error_type: Type of error (e.g., "decode_error", "plugin_error")
        message: Error message
        exc_info: Exception object (will extract traceback)
        **kwargs: Additional fields to include
    """
    event_data = {"error_type": error_type}
    event_data.update(_event_data(kwargs))

    extra = {
        "event_type": "error",
        "event_data": event_data,
    }
    logger.error(message, extra=extra, exc_info=exc_info)
