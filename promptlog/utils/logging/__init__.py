"""
Logging infrastructure for promptlog.

Structured events (``log_event``), a single operation decorator (``track``)
and request-scoped correlation IDs.
"""

from .context import get_correlation_id, set_correlation_id, set_operation_context
from .smart_logger import track
from .structured import StructuredLogger, create_development_formatter, log_event

__all__ = [
    "track",
    "log_event",
    "get_correlation_id",
    "set_correlation_id",
    "set_operation_context",
    "StructuredLogger",
    "create_development_formatter",
]
