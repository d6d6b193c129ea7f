"""
Completion service client and its error hierarchy.
"""

from .completion_client import CompletionClient, CompletionConfig, CompletionResult
from .exceptions import (
    MalformedResponseError,
    UpstreamAuthenticationError,
    UpstreamCause,
    UpstreamConnectionError,
    UpstreamError,
    UpstreamHTTPError,
    UpstreamTimeoutError,
)

__all__ = [
    "CompletionClient",
    "CompletionConfig",
    "CompletionResult",
    "MalformedResponseError",
    "UpstreamAuthenticationError",
    "UpstreamCause",
    "UpstreamConnectionError",
    "UpstreamError",
    "UpstreamHTTPError",
    "UpstreamTimeoutError",
]
