"""
Conversation store backed by PostgreSQL.

Durable, append-only-with-delete storage of prompt/response exchanges:
- Insert an exchange (id and timestamp assigned by the database)
- List all exchanges, newest first
- Delete an exchange by id (idempotent)

All methods return Result types; storage defects become StorageError failures.
"""

import logging
from typing import Any, Dict, List, Optional

import asyncpg

from ...models import ConversationRecord
from ...utils.logging import log_event, track
from ...utils.result import Result, Success, storage_error
from .utils import build_insert_query, record_to_dict, records_to_list

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS conversations (
        id SERIAL PRIMARY KEY,
        user_message TEXT NOT NULL,
        ai_response TEXT NOT NULL,
        user_email TEXT,
        timestamp TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_conversations_timestamp
        ON conversations (timestamp DESC)
    """,
)

# Range of the SERIAL (int4) id column
MIN_ID = -(2**31)
MAX_ID = 2**31 - 1

# Errors raised by asyncpg or the socket underneath it
STORAGE_EXCEPTIONS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class ConversationStore:
    """
    Store for conversation records.

    Relies on the database for id assignment and atomicity of every
    single-row statement; no application-level locking is done.
    """

    def __init__(self, db_pool: asyncpg.Pool):
        """
        Initialize conversation store.

        Args:
            db_pool: PostgreSQL connection pool
        """
        self.db_pool = db_pool

    async def initialize(self) -> None:
        """Create the conversations table and its index if missing."""
        async with self.db_pool.acquire() as conn:
            for statement in SCHEMA_STATEMENTS:
                await conn.execute(statement)

        log_event("conversation_schema_ready")

    @track(
        operation="conversation_insert",
        include_args=False,
        track_performance=True,
        frequency="low_frequency",
    )
    async def insert(
        self,
        user_message: str,
        ai_response: str,
        user_email: Optional[str] = None,
    ) -> Result[ConversationRecord, str]:
        """
        Persist one exchange.

        Args:
            user_message: Prompt submitted by the user
            ai_response: Generated completion text
            user_email: Optional submitter tag

        Returns:
            Success with the stored record, or Failure with StorageError
        """
        data: Dict[str, Any] = {
            "user_message": user_message,
            "ai_response": ai_response,
            "user_email": user_email,
        }
        query, values = build_insert_query("conversations", data)

        try:
            async with self.db_pool.acquire() as conn:
                row = await conn.fetchrow(query, *values)
        except STORAGE_EXCEPTIONS as e:
            return self._storage_failure("conversation_insert_error", e)

        if not row:
            return storage_error("Insert returned no row")

        record = ConversationRecord.from_row(record_to_dict(row))

        log_event(
            "conversation_inserted",
            {"conversation_id": record.id, "has_email": user_email is not None},
        )

        return Success(record)

    @track(
        operation="conversation_list",
        include_args=False,
        track_performance=True,
        frequency="medium_frequency",
    )
    async def list_conversations(self) -> Result[List[ConversationRecord], str]:
        """
        List every stored exchange, newest first.

        Returns:
            Success with a (possibly empty) list, or Failure with StorageError
        """
        query = """
            SELECT id, user_message, ai_response, user_email, timestamp
            FROM conversations
            ORDER BY timestamp DESC, id DESC
        """

        try:
            async with self.db_pool.acquire() as conn:
                rows = await conn.fetch(query)
        except STORAGE_EXCEPTIONS as e:
            return self._storage_failure("conversation_list_error", e)

        return Success([ConversationRecord.from_row(r) for r in records_to_list(rows)])

    @track(
        operation="conversation_delete",
        include_args=False,
        track_performance=True,
        frequency="low_frequency",
    )
    async def delete_by_id(self, conversation_id: int) -> Result[Dict[str, Any], str]:
        """
        Delete an exchange by id.

        Deleting an id that does not exist is not an error.

        Args:
            conversation_id: Record id

        Returns:
            Success with {"id", "deleted"}, or Failure with StorageError
        """
        if not MIN_ID <= conversation_id <= MAX_ID:
            return Success({"id": conversation_id, "deleted": False})

        try:
            async with self.db_pool.acquire() as conn:
                status = await conn.execute(
                    "DELETE FROM conversations WHERE id = $1", conversation_id
                )
        except STORAGE_EXCEPTIONS as e:
            return self._storage_failure(
                "conversation_delete_error", e, conversation_id=conversation_id
            )

        # asyncpg returns the command tag, e.g. "DELETE 1"
        deleted = _affected_rows(status) > 0

        log_event(
            "conversation_deleted",
            {"conversation_id": conversation_id, "deleted": deleted},
        )

        return Success({"id": conversation_id, "deleted": deleted})

    def _storage_failure(self, event: str, error: Exception, **context: Any):
        log_event(
            event,
            {"error": str(error), "error_type": type(error).__name__, **context},
            level=logging.ERROR,
        )
        return storage_error(
            f"Storage operation failed: {error}",
            context={"error_type": type(error).__name__, **context},
        )


def _affected_rows(status: Optional[str]) -> int:
    try:
        return int((status or "").rsplit(" ", 1)[-1])
    except ValueError:
        return 0
