"""
Structured exception hierarchy for the completion service.

Every failure of a completion call is raised as an ``UpstreamError`` carrying
a ``cause`` tag, so callers can map it without inspecting message strings.
"""

from typing import Any, Dict, Optional


class UpstreamCause:
    """Cause tags attached to UpstreamError."""

    AUTHENTICATION = "authentication"
    HTTP_STATUS = "http_status"
    MALFORMED_RESPONSE = "malformed_response"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"


class UpstreamError(Exception):
    """
    Base exception for completion service failures.

    Attributes:
        message: Human-readable error message
        cause: One of the UpstreamCause tags
        model: Model identifier (if applicable)
        status_code: HTTP status returned by the service, if any
        metadata: Additional context about the error
    """

    USER_MESSAGE = "The completion service could not process the request."

    def __init__(
        self,
        message: str,
        cause: str,
        model: Optional[str] = None,
        status_code: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.model = model
        self.status_code = status_code
        self.metadata = metadata or {}

    def get_user_message(self) -> str:
        """Get user-friendly error message."""
        return self.USER_MESSAGE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "cause": self.cause,
            "model": self.model,
            "status_code": self.status_code,
            "metadata": self.metadata,
        }

    def __str__(self) -> str:
        parts = [self.message, f"(cause: {self.cause})"]
        if self.status_code is not None:
            parts.append(f"(status: {self.status_code})")
        return " ".join(parts)


class UpstreamAuthenticationError(UpstreamError):
    """Credential missing, invalid, or lacking permissions."""

    USER_MESSAGE = "The completion service rejected the configured API key."

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: str = "",
    ):
        super().__init__(
            message=message,
            cause=UpstreamCause.AUTHENTICATION,
            model=model,
            status_code=status_code,
            metadata={"response_body": response_body[:1000]} if response_body else {},
        )


class UpstreamHTTPError(UpstreamError):
    """
    Non-success HTTP status from the completion service.

    Attributes:
        response_body: Raw response body (truncated in metadata)
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        response_body: str = "",
        model: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            cause=UpstreamCause.HTTP_STATUS,
            model=model,
            status_code=status_code,
            metadata={"response_body": response_body[:1000]},
        )
        self.response_body = response_body

    def get_user_message(self) -> str:
        if self.status_code == 429:
            return "The completion service is rate limiting requests. Please try again later."
        if self.status_code is not None and self.status_code >= 500:
            return "The completion service is temporarily unavailable."
        return self.USER_MESSAGE


class MalformedResponseError(UpstreamError):
    """Response body missing the expected fields."""

    def __init__(self, message: str, model: Optional[str] = None, body: Any = None):
        super().__init__(
            message=message,
            cause=UpstreamCause.MALFORMED_RESPONSE,
            model=model,
            metadata={"body_preview": str(body)[:500]} if body is not None else {},
        )


class UpstreamTimeoutError(UpstreamError):
    """Request exceeded the configured timeout."""

    def __init__(self, timeout_seconds: float, model: Optional[str] = None):
        super().__init__(
            message=f"Completion request timed out after {timeout_seconds} seconds",
            cause=UpstreamCause.TIMEOUT,
            model=model,
            metadata={"timeout_seconds": timeout_seconds},
        )
        self.timeout_seconds = timeout_seconds

    def get_user_message(self) -> str:
        return "The completion service did not respond in time. Please try again."


class UpstreamConnectionError(UpstreamError):
    """Network or transport failure before a response was received."""

    USER_MESSAGE = "Could not reach the completion service."

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            cause=UpstreamCause.TRANSPORT,
            model=model,
            metadata={"original_error": str(original_error)} if original_error else {},
        )
        self.original_error = original_error
