# bookdigest/summarization/chapter_call.py
"""
The chapter summarization call: one chapter in, one ChapterOutcome out.

The engine only depends on the ChapterSummarizer protocol, so tests and
alternative backends can swap in any async callable with the same shape.
LLMChapterSummarizer is the default implementation on top of AsyncChatClient.

Failure contract:
    TransientFailure   - network, timeout, HTTP 408/409/425/429/5xx (retried)
    MalformedResponse  - reply could not be parsed (fatal)
    RequestRejected    - provider refused the request, e.g. unknown model (fatal)
    ConfigurationError - provider rejected the credential (fatal)
    Cancelled          - token fired while the call was in flight
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from bookdigest.core.cancellation import CancellationToken, run_cancellable
from bookdigest.core.exceptions import (
    ChapterCallError,
    ConfigurationError,
    RequestRejected,
    TransientFailure,
)
from bookdigest.core.http import APIError, AuthenticationError, is_transient
from bookdigest.llm.chat import AsyncChatClient
from bookdigest.logging.logger import get_logger
from bookdigest.logging.tags import CHAT
from bookdigest.summarization.models import ChapterOutcome, ChapterRequest, ChapterResult
from bookdigest.summarization.parsing import parse_chapter_response
from bookdigest.summarization.prompts import build_messages

logger = get_logger(__name__)


@runtime_checkable
class ChapterSummarizer(Protocol):
    """Anything that can summarize one chapter."""

    async def __call__(
        self,
        request: ChapterRequest,
        token: Optional[CancellationToken] = None,
    ) -> ChapterOutcome: ...


def map_api_error(error: APIError) -> ChapterCallError | ConfigurationError:
    """Translate a transport-level APIError into the chapter-call taxonomy."""
    if isinstance(error, AuthenticationError):
        return ConfigurationError(f"{error}. Check your API key for provider '{error.provider}'.")
    if is_transient(error):
        return TransientFailure(str(error))
    return RequestRejected(str(error))


class LLMChapterSummarizer:
    """
    ChapterSummarizer backed by an OpenAI-compatible chat endpoint.

    Examples:
        >>> async with AsyncChatClient(base_url=url, api_key=key, model=m) as client:
        ...     summarizer = LLMChapterSummarizer(client)
        ...     outcome = await summarizer(ChapterRequest("", chapter_text))
    """

    def __init__(self, chat_client: AsyncChatClient):
        self.chat_client = chat_client

    async def __call__(
        self,
        request: ChapterRequest,
        token: Optional[CancellationToken] = None,
    ) -> ChapterOutcome:
        messages = build_messages(request)

        try:
            raw = await run_cancellable(self.chat_client.chat(messages), token)
        except APIError as e:
            raise map_api_error(e) from e

        outcome = parse_chapter_response(raw)
        if isinstance(outcome, ChapterResult):
            logger.debug(f"{CHAT} Chapter reply: '{outcome.title}' ({len(outcome.summary)} chars)")
        else:
            logger.debug(f"{CHAT} Chapter reply: not a chapter")
        return outcome

    async def aclose(self) -> None:
        await self.chat_client.aclose()


__all__ = ["ChapterSummarizer", "LLMChapterSummarizer", "map_api_error"]
