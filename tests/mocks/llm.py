from typing import List, Optional

from promptlog.llm import CompletionResult, UpstreamError


class MockCompletionClient:
    def __init__(self, reply: str = "We bake joy into every loaf."):
        self.reply = reply
        self.error: Optional[UpstreamError] = None
        self.prompts: List[str] = []
        self.is_initialized = True

    async def complete(self, prompt: str) -> CompletionResult:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return CompletionResult(content=self.reply, model="gpt-3.5-turbo")

    async def cleanup(self) -> None:
        self.is_initialized = False
