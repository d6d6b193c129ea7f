"""
Context management for request-scoped logging with correlation IDs.

Each inbound HTTP request gets its own correlation ID so the log events of
concurrent requests can be told apart.
"""

import contextvars
import uuid
from typing import Any, Dict, Optional

# Context variables for request-scoped data
_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)
_operation_context: contextvars.ContextVar[Optional[Dict[str, Any]]] = (
    contextvars.ContextVar("operation_context", default=None)
)


def get_correlation_id() -> str:
    """
    Get the current correlation ID, generating one if none exists.

    Returns:
        Correlation ID string for tracking requests across components
    """
    correlation_id = _correlation_id.get()
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
        _correlation_id.set(correlation_id)
    return correlation_id


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Set the correlation ID for the current context.

    Args:
        correlation_id: ID to use; a fresh UUID is generated when omitted

    Returns:
        The correlation ID now in effect
    """
    correlation_id = correlation_id or str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def set_operation_context(**context: Any) -> None:
    """Merge key/value pairs into the operation context of the current task."""
    current = get_operation_context()
    current.update(context)
    _operation_context.set(current)


def get_operation_context() -> Dict[str, Any]:
    """
    Get the current operation context dictionary.

    Returns:
        Dictionary containing operation-scoped context data
    """
    context = _operation_context.get()
    return context.copy() if context is not None else {}
