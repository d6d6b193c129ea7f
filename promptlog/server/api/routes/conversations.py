"""
Conversation history API routes.

Provides REST endpoints for the stored exchanges:
- List conversations (newest first)
- Delete a conversation by id
"""

from typing import List

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from promptlog.models import ConversationRecord
from promptlog.storage import ConversationStore

from ..dependencies import get_store
from ..error_formatting import failure_response

router = APIRouter(tags=["conversations"])


@router.get("/conversations", response_model=List[ConversationRecord])
async def list_conversations(
    store: ConversationStore = Depends(get_store),  # noqa: B008
):
    """List every stored conversation ordered by timestamp, newest first."""
    result = await store.list_conversations()

    if result.is_failure():
        return failure_response(result)

    return result.unwrap()


@router.delete("/conversations/{conversation_id}")
async def delete_conversation(
    conversation_id: int,
    store: ConversationStore = Depends(get_store),  # noqa: B008
):
    """
    Delete a conversation.

    Deleting an id that does not exist still succeeds.
    """
    result = await store.delete_by_id(conversation_id)

    if result.is_failure():
        return failure_response(result)

    outcome = result.unwrap()
    message = (
        "Conversation deleted" if outcome["deleted"] else "Conversation not present"
    )

    return JSONResponse(
        content=jsonable_encoder(
            {
                "success": True,
                "message": message,
                "id": conversation_id,
                "deleted": outcome["deleted"],
            }
        )
    )
