"""
Storage layer for promptlog.
"""

from .database import ConversationStore

__all__ = ["ConversationStore"]
