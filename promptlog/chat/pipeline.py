"""
Chat request pipeline.

Runs one chat request through validate → complete → persist, strictly in
that order and with a single attempt per step:

    VALIDATING ─fail→ REJECTED
        │
    COMPLETING ─fail→ FAILED   (no record created)
        │
    PERSISTING ─fail→ FAILED   (generated text discarded)
        │
    RESPONDED
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from ..llm import CompletionClient, UpstreamError
from ..models import ConversationRecord
from ..storage import ConversationStore
from ..utils.logging import log_event
from ..utils.result import Failure, Result, Success, upstream_error
from .validation import RequestValidator


class PipelineState(str, Enum):
    VALIDATING = "validating"
    COMPLETING = "completing"
    PERSISTING = "persisting"
    RESPONDED = "responded"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass
class ChatOutcome:
    """Successful result of one chat request."""

    reply: str
    record: ConversationRecord


class ConversationPipeline:
    """
    Sole coordinator of the chat flow.

    All collaborators are injected; the pipeline holds no per-request state.
    """

    def __init__(
        self,
        validator: RequestValidator,
        completion_client: CompletionClient,
        store: ConversationStore,
    ):
        self.validator = validator
        self.completion_client = completion_client
        self.store = store

    async def handle(
        self, payload: Optional[Mapping[str, Any]]
    ) -> Result[ChatOutcome, str]:
        """
        Process one chat request.

        Args:
            payload: Parsed request body ({"message": ..., "email": ...})

        Returns:
            Success with the reply and stored record; Failure with
            ValidationError, UpstreamError or StorageError otherwise
        """
        state = PipelineState.VALIDATING

        validated = self.validator.check(payload)
        if validated.is_failure():
            self._transition(state, PipelineState.REJECTED, reason=validated.error)
            return validated
        request = validated.unwrap()

        state = self._transition(state, PipelineState.COMPLETING)
        try:
            completion = await self.completion_client.complete(request.message)
        except UpstreamError as e:
            self._transition(state, PipelineState.FAILED, reason=e.cause)
            return upstream_error(
                e.get_user_message(),
                context={"cause": e.cause, "status_code": e.status_code},
            )

        state = self._transition(state, PipelineState.PERSISTING)
        stored = await self.store.insert(
            user_message=request.message,
            ai_response=completion.content,
            user_email=request.email,
        )
        if stored.is_failure():
            self._transition(state, PipelineState.FAILED, reason=stored.error_type)
            return stored

        record = stored.unwrap()
        self._transition(state, PipelineState.RESPONDED, conversation_id=record.id)
        return Success(ChatOutcome(reply=completion.content, record=record))

    def _transition(
        self, from_state: PipelineState, to_state: PipelineState, **data: Any
    ) -> PipelineState:
        failed = to_state in (PipelineState.REJECTED, PipelineState.FAILED)
        log_event(
            "chat_pipeline_state",
            {"from_state": from_state.value, "to_state": to_state.value, **data},
            level=logging.WARNING if failed else logging.DEBUG,
        )
        return to_state
