"""
Operation tracking for service coroutines.

``@track`` times an async service call and logs one ``operation_completed``
or ``operation_failed`` event. Service methods in promptlog return Result
objects instead of raising, so a returned Failure is reported as failed too,
with its error type and HTTP status.
"""

import functools
import logging
import random
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar, Union

from .context import get_correlation_id
from .structured import log_event

T = TypeVar("T")

# Chat and export traffic is low volume; listing is polled by the UI
SAMPLE_RATES = {
    "low_frequency": 1.0,
    "medium_frequency": 0.5,
    "high_frequency": 0.1,
}

# Anything that changes stored data or calls the completion service is always logged
ALWAYS_LOGGED = ("insert", "delete", "export", "complete")

REDACTED_KEYS = ("api_key", "authorization", "password", "email")
TEXT_KEYS = ("prompt", "message", "user_message", "ai_response")
MAX_VALUE_LENGTH = 100


def track(
    operation: Optional[str] = None,
    level: int = logging.INFO,
    frequency: str = "low_frequency",
    include_args: Union[bool, List[str]] = False,
    track_performance: bool = True,
):
    """
    Log the outcome of an async operation.

    Args:
        operation: Event name; defaults to the function's qualified name
        level: Level for successful outcomes (failures log at WARNING or ERROR)
        frequency: Key into SAMPLE_RATES
        include_args: True for every keyword argument, a list for specific
            ones, False for none; credentials and emails are redacted and
            prompt text is reduced to its length
        track_performance: Add ``duration_ms`` to the event

    Example:
        @track(operation="conversation_delete", include_args=["conversation_id"])
        async def delete_by_id(self, conversation_id: int): ...
    """

    def decorator(
        func: Callable[..., Awaitable[T]]
    ) -> Callable[..., Awaitable[T]]:
        name = operation or func.__qualname__.replace(".", "_").lower()

        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            if not _sampled(name, frequency):
                return await func(*args, **kwargs)

            context: Dict[str, Any] = {
                "operation": name,
                "correlation_id": get_correlation_id(),
                **_loggable_kwargs(kwargs, include_args),
            }
            started = time.perf_counter()

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                if track_performance:
                    context["duration_ms"] = _elapsed_ms(started)
                context.update(
                    success=False,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                log_event("operation_failed", context, logging.ERROR)
                raise

            if track_performance:
                context["duration_ms"] = _elapsed_ms(started)
            context.update(_describe_result(result))

            if context["success"]:
                log_event("operation_completed", context, level)
            else:
                log_event("operation_failed", context, logging.WARNING)
            return result

        return wrapper

    return decorator


def _sampled(operation: str, frequency: str) -> bool:
    if any(marker in operation for marker in ALWAYS_LOGGED):
        return True
    return random.random() < SAMPLE_RATES.get(frequency, 1.0)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _loggable_kwargs(
    kwargs: Dict[str, Any], include_args: Union[bool, List[str]]
) -> Dict[str, Any]:
    if include_args is False:
        return {}
    keys = kwargs.keys() if include_args is True else include_args
    return {
        f"arg_{key}": _sanitize(key, kwargs[key]) for key in keys if key in kwargs
    }


def _sanitize(key: str, value: Any) -> Any:
    key = key.lower()
    if any(marker in key for marker in REDACTED_KEYS):
        return "[REDACTED]"
    if isinstance(value, str):
        if key in TEXT_KEYS:
            return f"<{len(value)} chars>"
        if len(value) > MAX_VALUE_LENGTH:
            return f"{value[:MAX_VALUE_LENGTH]}..."
        return value
    if value is None or isinstance(value, (int, float, bool)):
        return value
    return f"<{type(value).__name__}>"


def _describe_result(result: Any) -> Dict[str, Any]:
    """Summarize a return value without logging its contents."""
    if not hasattr(result, "is_success"):
        return {"success": True, "result_type": type(result).__name__}

    if result.is_failure():
        return {
            "success": False,
            "error_type": result.error_type,
            "status_code": result.status_code,
        }

    value = result.unwrap()
    info: Dict[str, Any] = {"success": True, "result_type": type(value).__name__}
    if isinstance(value, list):
        info["result_length"] = len(value)
    return info
