"""
Conversation data models.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ConversationRecord(BaseModel):
    """One persisted prompt/response exchange."""

    id: int = Field(description="Store-assigned identifier, never reused")
    user_message: str = Field(description="Prompt submitted by the user")
    ai_response: str = Field(description="Text generated by the completion service")
    user_email: Optional[str] = Field(
        default=None, description="Optional tag identifying the submitter"
    )
    timestamp: datetime = Field(description="Creation time assigned by the store")

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ConversationRecord":
        return cls(
            id=row["id"],
            user_message=row["user_message"],
            ai_response=row["ai_response"],
            user_email=row.get("user_email"),
            timestamp=row["timestamp"],
        )


class ChatRequest(BaseModel):
    """Inbound body of ``POST /chat``; presence is checked by the validator."""

    message: Optional[str] = Field(None, description="Prompt for the completion service")
    email: Optional[str] = Field(None, description="Optional submitter tag")


class ChatResponse(BaseModel):
    reply: str
