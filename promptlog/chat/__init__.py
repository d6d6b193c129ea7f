"""
Chat flow: payload validation and the request/persist/respond pipeline.
"""

from .pipeline import ChatOutcome, ConversationPipeline, PipelineState
from .validation import RequestValidator, ValidatedRequest

__all__ = [
    "ChatOutcome",
    "ConversationPipeline",
    "PipelineState",
    "RequestValidator",
    "ValidatedRequest",
]
