"""
Completion client for the OpenAI Chat Completions API.

Sends one prompt per call with a fixed system preamble, model and output
limit, and returns the first generated choice. Failures are raised as
``UpstreamError`` subclasses; no call is ever retried.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import aiohttp

from ..utils.logging import log_event, track
from .exceptions import (
    MalformedResponseError,
    UpstreamAuthenticationError,
    UpstreamConnectionError,
    UpstreamHTTPError,
    UpstreamTimeoutError,
)


@dataclass(frozen=True)
class CompletionConfig:
    """
    Configuration for the completion client.

    Attributes:
        api_key: Service credential; requests fail fast when it is missing
        base_url: API base URL
        model: Model identifier sent with every request
        max_tokens: Maximum output tokens per completion
        system_prompt: Fixed system instruction prepended to every prompt
        timeout_seconds: Total time bound for one request
    """

    api_key: Optional[str]
    system_prompt: str
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-3.5-turbo"
    max_tokens: int = 300
    timeout_seconds: float = 30.0


@dataclass
class CompletionResult:
    """Text generated for one prompt."""

    content: str
    model: str
    finish_reason: Optional[str] = None
    usage: Dict[str, Any] = field(default_factory=dict)


class CompletionClient:
    """
    Client for the external completion service.

    Uses one persistent aiohttp session with connection pooling; call
    ``initialize()`` before use and ``cleanup()`` on shutdown.
    """

    def __init__(self, config: CompletionConfig):
        self.config = config
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def is_initialized(self) -> bool:
        return self._session is not None and not self._session.closed

    async def initialize(self) -> None:
        """Create the HTTP session."""
        if self.is_initialized:
            return

        connector = aiohttp.TCPConnector(
            limit=100,
            limit_per_host=30,
            ttl_dns_cache=300,
            enable_cleanup_closed=True,
        )
        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.config.timeout_seconds),
            connector=connector,
            connector_owner=True,
        )

        log_event(
            "completion_client_initialized",
            {
                "base_url": self.config.base_url,
                "model": self.config.model,
                "timeout": self.config.timeout_seconds,
                "credential_configured": bool(self.config.api_key),
            },
        )

    async def cleanup(self) -> None:
        """Close the HTTP session and release connections."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def build_messages(self, prompt: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.config.system_prompt},
            {"role": "user", "content": prompt},
        ]

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            raise RuntimeError(
                "Completion client not initialized. Call initialize() first."
            )
        return self._session

    @track(
        operation="completion_complete",
        include_args=False,
        track_performance=True,
        frequency="low_frequency",
    )
    async def complete(self, prompt: str) -> CompletionResult:
        """
        Generate a completion for a single prompt.

        Args:
            prompt: User prompt, sent after the fixed system instruction

        Returns:
            CompletionResult with the first choice's text

        Raises:
            UpstreamAuthenticationError: Credential missing or rejected
            UpstreamHTTPError: Any other non-success status
            MalformedResponseError: Body lacks choices[0].message.content
            UpstreamTimeoutError: Request exceeded the configured timeout
            UpstreamConnectionError: Transport failure
        """
        model = self.config.model

        if not self.config.api_key:
            raise UpstreamAuthenticationError(
                "Completion service credential is not configured", model=model
            )

        session = self._ensure_session()
        payload = {
            "model": model,
            "messages": self.build_messages(prompt),
            "max_tokens": self.config.max_tokens,
        }

        try:
            async with session.post(
                f"{self.config.base_url}/chat/completions",
                json=payload,
                headers=self._build_headers(),
            ) as response:
                if not 200 <= response.status < 300:
                    error_text = await response.text()
                    log_event(
                        "completion_request_failed",
                        {
                            "status": response.status,
                            "cause": "http_status",
                            "error": error_text[:500],
                            "model": model,
                        },
                        level=logging.ERROR,
                    )
                    if response.status in (401, 403):
                        raise UpstreamAuthenticationError(
                            f"Completion service rejected credential (HTTP {response.status})",
                            model=model,
                            status_code=response.status,
                            response_body=error_text,
                        )
                    raise UpstreamHTTPError(
                        f"Completion request failed (HTTP {response.status})",
                        status_code=response.status,
                        response_body=error_text,
                        model=model,
                    )

                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise MalformedResponseError(
                        f"Completion response is not valid JSON: {e}", model=model
                    ) from e

        except asyncio.TimeoutError as e:
            log_event(
                "completion_request_failed",
                {"cause": "timeout", "status": None, "model": model},
                level=logging.ERROR,
            )
            raise UpstreamTimeoutError(self.config.timeout_seconds, model=model) from e
        except aiohttp.ClientError as e:
            log_event(
                "completion_request_failed",
                {"cause": "transport", "status": None, "error": str(e)},
                level=logging.ERROR,
            )
            raise UpstreamConnectionError(
                f"Failed to connect to completion service: {e}",
                model=model,
                original_error=e,
            ) from e

        return self._parse_response(data, model)

    def _parse_response(self, data: Any, model: str) -> CompletionResult:
        try:
            choice = data["choices"][0]
            content = choice["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError(
                f"Completion response missing choices[0].message.content ({e!r})",
                model=model,
                body=data,
            ) from e

        if not isinstance(content, str):
            raise MalformedResponseError(
                "Completion content is not a string", model=model, body=data
            )

        return CompletionResult(
            content=content,
            model=data.get("model", model),
            finish_reason=choice.get("finish_reason"),
            usage=data.get("usage") or {},
        )
