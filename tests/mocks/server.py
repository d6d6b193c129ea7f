from pathlib import Path
from unittest.mock import Mock

from promptlog.chat import ConversationPipeline, RequestValidator
from promptlog.export import ExportJob
from tests.mocks.llm import MockCompletionClient
from tests.mocks.storage import MockConversationStore


class MockServiceContainer:
    """Same surface as ServiceContainer, wired to in-memory doubles."""

    def __init__(
        self,
        export_dir: Path,
        require_email: bool = False,
        grace_seconds: float = 30.0,
    ):
        self.db_pool = Mock()
        self.store = MockConversationStore()
        self.completion_client = MockCompletionClient()
        self.pipeline = ConversationPipeline(
            validator=RequestValidator(require_email=require_email),
            completion_client=self.completion_client,
            store=self.store,
        )
        self.export_job = ExportJob(
            store=self.store,
            export_dir=export_dir,
            grace_seconds=grace_seconds,
        )
        self.is_initialized = True
