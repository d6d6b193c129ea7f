"""
Pydantic models for promptlog.
"""

from .conversation import ChatRequest, ChatResponse, ConversationRecord

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ConversationRecord",
]
