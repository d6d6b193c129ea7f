"""
Result type for explicit error handling.

Services return ``Success`` or ``Failure`` instead of raising for expected
errors. A Failure carries its error kind and HTTP status, so routes turn it
into a JSON response without further mapping.

Example:
    >>> result = validation_error("missing message", context={"field": "message"})
    >>> result.status_code
    400
    >>> result.to_dict()["error_type"]
    'ValidationError'
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, NamedTuple, Optional, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass
class Success(Generic[T]):
    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Success({self.value!r})"


@dataclass
class Failure(Generic[E]):
    """
    A failed operation.

    Attributes:
        error: Human-readable error message
        error_type: Error kind, one of the ErrorKind names below
        status_code: HTTP status reported to the client
        context: Extra fields included in the response body
        recoverable: Whether the client may usefully retry
    """

    error: E
    error_type: str = "InternalError"
    status_code: int = 500
    context: Optional[Dict[str, Any]] = None
    recoverable: bool = False

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> Any:
        """
        Raises:
            RuntimeError: Always; check ``is_failure()`` first
        """
        raise RuntimeError(f"Called unwrap on Failure: {self.error}")

    def to_dict(self) -> Dict[str, Any]:
        """Response body for this failure."""
        body: Dict[str, Any] = {
            "success": False,
            "error": str(self.error),
            "error_type": self.error_type,
        }
        if self.context:
            body["context"] = self.context
        if self.recoverable:
            body["recoverable"] = True
        return body

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Failure({self.error_type}: {self.error})"


Result = Union[Success[T], Failure[E]]


class ErrorKind(NamedTuple):
    name: str
    status_code: int
    recoverable: bool


VALIDATION = ErrorKind("ValidationError", 400, True)
NOT_FOUND = ErrorKind("NotFoundError", 404, False)
UPSTREAM = ErrorKind("UpstreamError", 500, True)
STORAGE = ErrorKind("StorageError", 500, True)
INTERNAL = ErrorKind("InternalError", 500, False)


def _failure(
    kind: ErrorKind, message: str, context: Optional[Dict[str, Any]] = None
) -> Failure:
    return Failure(
        error=message,
        error_type=kind.name,
        status_code=kind.status_code,
        context=context,
        recoverable=kind.recoverable,
    )


def validation_error(message: str, context: Optional[Dict[str, Any]] = None) -> Failure:
    """Malformed or incomplete request; nothing was attempted."""
    return _failure(VALIDATION, message, context)


def not_found_error(message: str, context: Optional[Dict[str, Any]] = None) -> Failure:
    return _failure(NOT_FOUND, message, context)


def upstream_error(message: str, context: Optional[Dict[str, Any]] = None) -> Failure:
    """The completion service failed or answered with something unusable."""
    return _failure(UPSTREAM, message, context)


def storage_error(message: str, context: Optional[Dict[str, Any]] = None) -> Failure:
    """The database could not complete the operation."""
    return _failure(STORAGE, message, context)


def internal_error(message: str, context: Optional[Dict[str, Any]] = None) -> Failure:
    return _failure(INTERNAL, message, context)
