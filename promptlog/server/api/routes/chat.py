"""
Chat API route.

Accepts a prompt, runs it through the conversation pipeline and returns the
generated reply.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends

from promptlog.chat import ConversationPipeline
from promptlog.models import ChatRequest, ChatResponse

from ..dependencies import get_pipeline
from ..error_formatting import failure_response

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: Optional[ChatRequest] = Body(None),  # noqa: B008
    pipeline: ConversationPipeline = Depends(get_pipeline),  # noqa: B008
):
    """
    Generate a reply for a prompt and store the exchange.

    Returns 400 when the message (or a required email) is missing, including
    when the body itself is absent, and 500 when the completion service or
    the store fails.
    """
    result = await pipeline.handle(request.model_dump() if request else None)

    if result.is_failure():
        return failure_response(result)

    return ChatResponse(reply=result.unwrap().reply)
