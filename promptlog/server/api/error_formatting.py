"""
Error formatting utilities for API responses.
"""

from typing import Any, Dict

from fastapi.responses import JSONResponse

from ...utils.result import Failure


def failure_response(failure: Failure, message_key: str = "error") -> JSONResponse:
    """
    Turn a Failure into a JSON error response.

    Args:
        failure: The failed Result
        message_key: Key carrying the human-readable text; the export
            endpoint reports a missing dataset under "message"

    Returns:
        JSONResponse with the failure's status code
    """
    content: Dict[str, Any] = failure.to_dict()
    if message_key != "error":
        content[message_key] = content.pop("error")
    return JSONResponse(content=content, status_code=failure.status_code)


def internal_error_response(message: str = "Internal server error") -> JSONResponse:
    return JSONResponse(
        content={"success": False, "error": message, "error_type": "InternalError"},
        status_code=500,
    )
