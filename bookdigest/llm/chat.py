# bookdigest/llm/chat.py
"""
Async chat client for OpenAI-compatible /chat/completions endpoints.

OpenAI, DeepSeek and OpenRouter all speak this format, so a single client
covers every provider preset. Errors surface as structured APIErrors from
bookdigest.core.http; mapping them onto retry semantics is the caller's job.

Usage:
    async with AsyncChatClient(base_url=url, api_key=key, model="gpt-4o-mini") as client:
        text = await client.chat([
            {"role": "system", "content": "You summarize books."},
            {"role": "user", "content": "..."},
        ])
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, Optional, TypedDict

import httpx

from bookdigest.core.http import (
    create_async_api_client,
    handle_api_error,
    raise_for_status,
)
from bookdigest.core.utils import extract_path
from bookdigest.logging.logger import get_logger
from bookdigest.logging.tags import CHAT

if TYPE_CHECKING:
    from bookdigest.config.schema import ProviderConfig

logger = get_logger(__name__)

CHAT_ENDPOINT = "/chat/completions"
CONTENT_PATH = "choices[0].message.content"


class Message(TypedDict):
    """OpenAI-compatible chat message."""

    role: Literal["system", "user", "assistant"]
    content: str


class AsyncChatClient:
    """Chat completion client bound to one provider and model."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        model: str,
        provider: str = "openai",
        temperature: float = 0.2,
        max_tokens: Optional[int] = 1000,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.model = model
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_config(
        cls,
        config: "ProviderConfig",
        api_key: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "AsyncChatClient":
        """Build a client from the validated `provider:` config section."""
        return cls(
            base_url=config.resolved_base_url(),
            api_key=api_key,
            model=config.resolved_model(),
            provider=config.name,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.timeout,
            transport=transport,
        )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            extra: dict[str, Any] = {}
            if self._transport is not None:
                extra["transport"] = self._transport
            self._client = create_async_api_client(
                base_url=self.base_url,
                api_key=self._api_key,
                timeout=self._timeout,
                timeout_type="chat",
                **extra,
            )
        return self._client

    def build_payload(self, messages: list[Message]) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": list(messages),
            "temperature": self.temperature,
        }
        if self.max_tokens:
            payload["max_tokens"] = self.max_tokens
        return payload

    async def chat(self, messages: list[Message]) -> str:
        """
        Send messages and return the assistant's reply text.

        Raises:
            APIError: On HTTP errors, timeouts and connection failures
        """
        payload = self.build_payload(messages)
        client = self._get_client()

        logger.debug(f"{CHAT} POST {CHAT_ENDPOINT} model={self.model} messages={len(messages)}")

        try:
            response = await client.post(CHAT_ENDPOINT, json=payload)
        except httpx.HTTPError as exc:
            raise handle_api_error(exc, provider=self.provider, endpoint=CHAT_ENDPOINT) from exc

        raise_for_status(response, provider=self.provider, endpoint=CHAT_ENDPOINT)

        try:
            data = response.json()
        except ValueError:
            logger.warning(f"{CHAT} Non-JSON response body from {self.provider}")
            return ""

        content = extract_path(data, CONTENT_PATH, strict=False)
        if not content:
            logger.warning(f"{CHAT} Failed to extract response content. Full response: {data}")
            return ""
        return str(content)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AsyncChatClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


__all__ = ["AsyncChatClient", "CHAT_ENDPOINT", "Message"]
