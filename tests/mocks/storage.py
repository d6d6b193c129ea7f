from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, Mock

from promptlog.models import ConversationRecord
from promptlog.utils.result import Failure, Result, Success, storage_error

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class MockConversationStore:
    """In-memory stand-in for ConversationStore with the same Result contract."""

    def __init__(self):
        self.records: Dict[int, ConversationRecord] = {}
        self._next_id = 1
        self.failure: Optional[Failure] = None

    def fail_with(self, message: str = "connection refused") -> None:
        self.failure = storage_error(message)

    async def insert(
        self,
        user_message: str,
        ai_response: str,
        user_email: Optional[str] = None,
    ) -> Result[ConversationRecord, str]:
        if self.failure is not None:
            return self.failure

        record = ConversationRecord(
            id=self._next_id,
            user_message=user_message,
            ai_response=ai_response,
            user_email=user_email,
            timestamp=BASE_TIME + timedelta(seconds=self._next_id),
        )
        self.records[record.id] = record
        self._next_id += 1
        return Success(record)

    async def list_conversations(self) -> Result[List[ConversationRecord], str]:
        if self.failure is not None:
            return self.failure
        return Success(
            sorted(
                self.records.values(),
                key=lambda r: (r.timestamp, r.id),
                reverse=True,
            )
        )

    async def delete_by_id(self, conversation_id: int) -> Result[Dict[str, Any], str]:
        if self.failure is not None:
            return self.failure
        deleted = self.records.pop(conversation_id, None) is not None
        return Success({"id": conversation_id, "deleted": deleted})


class MockConnection:
    def __init__(self):
        self.fetchrow = AsyncMock(return_value=None)
        self.fetch = AsyncMock(return_value=[])
        self.execute = AsyncMock(return_value="DELETE 0")
        self.fetchval = AsyncMock(return_value=None)


class MockPool:
    """asyncpg.Pool double whose acquire() yields a single MockConnection."""

    def __init__(self):
        self.conn = MockConnection()
        self.close = AsyncMock()
        self.acquire_error: Optional[Exception] = None
        self.acquire = Mock(side_effect=self._acquire)

    @asynccontextmanager
    async def _acquire(self):
        if self.acquire_error:
            raise self.acquire_error
        yield self.conn
