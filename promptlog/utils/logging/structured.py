"""
Structured event logging.

Every event is a name plus a flat dict of data, attached to the log record as
``structured_data``. The development formatter renders the events promptlog
emits as one-line summaries; records from other libraries pass through as
plain messages.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .context import get_correlation_id, get_operation_context

LOGGER_NAME = "promptlog"


class StructuredLogger:
    """Emits named events enriched with the request's correlation ID."""

    def __init__(self, name: str = LOGGER_NAME):
        self.logger = logging.getLogger(name)

    def event(
        self,
        event_name: str,
        data: Optional[Dict[str, Any]] = None,
        level: int = logging.INFO,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return

        structured_data: Dict[str, Any] = {
            "event": event_name,
            "correlation_id": get_correlation_id(),
            **get_operation_context(),
        }
        if data:
            structured_data.update(data)

        record = self.logger.makeRecord(
            self.logger.name, level, "(structured)", 0, event_name, (), None
        )
        record.structured_data = structured_data
        self.logger.handle(record)


_logger = StructuredLogger()


def log_event(
    event_name: str, data: Optional[Dict[str, Any]] = None, level: int = logging.INFO
) -> None:
    """
    Log a structured event on the ``promptlog`` logger.

    Example::

        log_event("conversation_inserted", {"conversation_id": 42, "has_email": True})
    """
    _logger.event(event_name, data, level)


def _duration(data: Dict[str, Any]) -> str:
    duration_ms = data.get("duration_ms")
    if duration_ms is None:
        return ""
    if duration_ms >= 1000:
        return f"{duration_ms / 1000:.1f}s "
    return f"{duration_ms}ms "


def _summarize(data: Dict[str, Any]) -> str:
    event = data.get("event", "")
    operation = data.get("operation", "")

    if event == "operation_completed":
        summary = f"✅ {_duration(data)}{operation}"
        if "result_length" in data:
            summary += f" ({data['result_length']} items)"
        return summary

    if event == "operation_failed":
        detail = data.get("error_type", "Error")
        if data.get("status_code"):
            detail += f" {data['status_code']}"
        message = data.get("error_message", "")
        if message:
            detail += f": {message[:60]}"
        return f"❌ {_duration(data)}{operation} failed ({detail})"

    if event == "chat_pipeline_state":
        summary = f"🔀 {data.get('from_state')} → {data.get('to_state')}"
        if data.get("reason"):
            summary += f" ({data['reason']})"
        return summary

    if event == "conversation_inserted":
        return f"💾 conversation {data.get('conversation_id')} stored"

    if event == "conversation_deleted":
        outcome = "deleted" if data.get("deleted") else "already absent"
        return f"🗑️  conversation {data.get('conversation_id')} {outcome}"

    if event == "completion_request_failed":
        return f"⚠️  completion failed: {data.get('cause')} (status={data.get('status')})"

    if event == "export_artifact_created":
        return f"📄 export {data.get('rows', 0)} rows, {data.get('size_bytes', 0)}B"

    if event in ("export_artifact_released", "export_artifact_expired"):
        verb = "released" if event.endswith("released") else "expired"
        return f"🧹 export {verb}: {data.get('path', '')}"

    if event == "export_cleanup_failed":
        return f"⚠️  could not remove {data.get('path')}: {data.get('error')}"

    if event == "http_request":
        return f"🌐 {data.get('method')} {data.get('path')} → {data.get('status_code')}"

    return f"📝 {event}"


class DevelopmentFormatter(logging.Formatter):
    """``HH:MM:SS.mmm | LEVEL | request-id | summary``"""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        data: Optional[Dict[str, Any]] = getattr(record, "structured_data", None)

        if not data:
            return f"{timestamp} | {record.levelname:5} | {record.getMessage()}"

        request_id = str(data.get("correlation_id", ""))[:8]
        return f"{timestamp} | {record.levelname:5} | {request_id} | {_summarize(data)}"


def create_development_formatter() -> logging.Formatter:
    return DevelopmentFormatter()
