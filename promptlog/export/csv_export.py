"""
CSV export of the conversation history.

Each export writes a snapshot to its own uniquely named transient file and
hands back an ``ExportArtifact``. The artifact deletes its file when it is
released: after streaming finishes or aborts, or when the grace period runs
out, whichever comes first.
"""

import asyncio
import csv
import io
import logging
import uuid
from pathlib import Path
from typing import AsyncIterator, Iterable, List, Optional

import aiofiles
import aiofiles.os

from ..models import ConversationRecord
from ..storage import ConversationStore
from ..utils.logging import log_event, track
from ..utils.result import Result, Success, internal_error, not_found_error

EXPORT_COLUMNS = ("id", "timestamp", "user_message", "ai_response")
EXPORT_FILENAME = "conversations.csv"
CHUNK_SIZE = 64 * 1024


def serialize_csv(records: Iterable[ConversationRecord]) -> str:
    """Render records as CSV with a fixed header and column order."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for record in records:
        writer.writerow(
            [
                record.id,
                record.timestamp.isoformat(),
                record.user_message,
                record.ai_response,
            ]
        )
    return buffer.getvalue()


class ExportArtifact:
    """
    A transient export file owned by exactly one export request.

    ``release()`` is idempotent and never raises; cleanup failures are logged.
    """

    def __init__(
        self,
        path: Path,
        row_count: int,
        size_bytes: int,
        grace_seconds: float,
        filename: str = EXPORT_FILENAME,
    ):
        self.path = path
        self.row_count = row_count
        self.size_bytes = size_bytes
        self.filename = filename
        self.media_type = "text/csv"
        self._released = False
        self._reaper: Optional[asyncio.Task] = asyncio.get_running_loop().create_task(
            self._expire(grace_seconds)
        )

    @property
    def released(self) -> bool:
        return self._released

    async def stream(self, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
        """Yield the file contents, releasing the file on every exit path."""
        try:
            async with aiofiles.open(self.path, "rb") as f:
                while True:
                    chunk = await f.read(chunk_size)
                    if not chunk:
                        break
                    yield chunk
        finally:
            await self.release()

    async def read_all(self) -> bytes:
        """Read the whole artifact and release it."""
        return b"".join([chunk async for chunk in self.stream()])

    async def release(self) -> None:
        """Delete the file and cancel the grace-period reaper."""
        reaper, self._reaper = self._reaper, None
        if reaper is not None and reaper is not asyncio.current_task():
            reaper.cancel()
        await self._remove("export_artifact_released")

    async def _expire(self, grace_seconds: float) -> None:
        await asyncio.sleep(grace_seconds)
        self._reaper = None
        await self._remove("export_artifact_expired")

    async def _remove(self, event: str) -> None:
        if self._released:
            return
        self._released = True

        try:
            await aiofiles.os.remove(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            log_event(
                "export_cleanup_failed",
                {"path": str(self.path), "error": str(e)},
                level=logging.WARNING,
            )
            return

        log_event(event, {"path": str(self.path)})


class ExportJob:
    """Snapshots the store and serializes it to a transient CSV file."""

    def __init__(
        self,
        store: ConversationStore,
        export_dir: Path,
        grace_seconds: float = 30.0,
    ):
        self.store = store
        self.export_dir = Path(export_dir)
        self.grace_seconds = grace_seconds

    def _new_path(self) -> Path:
        return self.export_dir / f"conversations-{uuid.uuid4().hex}.csv"

    @track(
        operation="conversation_export",
        include_args=False,
        track_performance=True,
        frequency="low_frequency",
    )
    async def export(self) -> Result[ExportArtifact, str]:
        """
        Export every stored exchange.

        Returns:
            Success with an ExportArtifact, NotFoundError when the store is
            empty (no file is created), or the store's StorageError
        """
        snapshot = await self.store.list_conversations()
        if snapshot.is_failure():
            return snapshot

        records: List[ConversationRecord] = snapshot.unwrap()
        if not records:
            return not_found_error("No conversations found")

        content = serialize_csv(records).encode("utf-8")
        path = self._new_path()

        try:
            await aiofiles.os.makedirs(self.export_dir, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            log_event(
                "export_write_failed",
                {"path": str(path), "error": str(e)},
                level=logging.ERROR,
            )
            try:
                await aiofiles.os.remove(path)
            except OSError:
                pass
            return internal_error(f"Failed to generate CSV: {e}")

        artifact = ExportArtifact(
            path=path,
            row_count=len(records),
            size_bytes=len(content),
            grace_seconds=self.grace_seconds,
        )

        log_event(
            "export_artifact_created",
            {"path": str(path), "rows": len(records), "size_bytes": len(content)},
        )

        return Success(artifact)
