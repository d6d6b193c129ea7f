"""
Inbound chat payload validation.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..utils.result import Result, Success, validation_error


@dataclass(frozen=True)
class ValidatedRequest:
    message: str
    email: Optional[str] = None


def _clean(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class RequestValidator:
    """
    Checks the shape of a chat payload before any external call is made.

    Pure: no I/O and no state beyond the ``require_email`` flag.
    """

    def __init__(self, require_email: bool = False):
        self.require_email = require_email

    def check(self, payload: Optional[Mapping[str, Any]]) -> Result[ValidatedRequest, str]:
        payload = payload or {}

        message = _clean(payload.get("message"))
        if message is None:
            return validation_error("missing message", context={"field": "message"})

        email = _clean(payload.get("email"))
        if self.require_email and email is None:
            return validation_error("missing email", context={"field": "email"})

        # The prompt is forwarded exactly as submitted
        return Success(ValidatedRequest(message=payload["message"], email=email))
