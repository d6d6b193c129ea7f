from tests.mocks.llm import MockCompletionClient
from tests.mocks.server import MockServiceContainer
from tests.mocks.storage import (
    BASE_TIME,
    MockConnection,
    MockConversationStore,
    MockPool,
)

__all__ = [
    "BASE_TIME",
    "MockCompletionClient",
    "MockConnection",
    "MockConversationStore",
    "MockPool",
    "MockServiceContainer",
]
