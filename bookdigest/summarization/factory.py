# bookdigest/summarization/factory.py
"""
Wiring: config -> credential -> chat client -> chapter summarizer -> engine.

Credentials are resolved here, before any network activity, so a missing key
fails fast with a ConfigurationError.
"""

from __future__ import annotations

from typing import Optional, Sequence

import httpx

from bookdigest.config.schema import BookdigestConfig
from bookdigest.core.cancellation import CancellationToken
from bookdigest.llm.chat import AsyncChatClient
from bookdigest.llm.credentials import resolve_api_key
from bookdigest.logging.logger import get_logger
from bookdigest.logging.tags import ENGINE
from bookdigest.summarization.chapter_call import LLMChapterSummarizer
from bookdigest.summarization.engine import ProgressCallback, ProgressiveSummarizer

logger = get_logger(__name__)


def create_chapter_summarizer(
    config: BookdigestConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> LLMChapterSummarizer:
    """
    Build the default LLM-backed chapter summarizer.

    Raises:
        CredentialError: If no API key can be resolved for the provider
    """
    provider = config.provider
    api_key = resolve_api_key(provider=provider.name, config={"api_key": provider.api_key})
    client = AsyncChatClient.from_config(provider, api_key, transport=transport)
    logger.debug(
        f"{ENGINE} Using provider '{provider.name}' model '{client.model}' at {client.base_url}"
    )
    return LLMChapterSummarizer(client)


def create_summarizer(
    chapters: Sequence[str],
    config: BookdigestConfig,
    *,
    stop_target: Optional[str] = None,
    table_of_contents: Optional[Sequence[str]] = None,
    token: Optional[CancellationToken] = None,
    on_progress: Optional[ProgressCallback] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ProgressiveSummarizer:
    """
    Build a ready-to-run ProgressiveSummarizer from config.

    Use the result as an async context manager (or call aclose()) to release
    the underlying HTTP client.

    Raises:
        ConfigurationError: Missing credential or invalid provider settings
    """
    summarizer = create_chapter_summarizer(config, transport=transport)
    return ProgressiveSummarizer(
        chapters,
        summarizer,
        stop_target=stop_target,
        table_of_contents=table_of_contents,
        retry_policy=config.retry_policy(),
        context_mode=config.engine.context_mode,
        similarity_threshold=config.engine.similarity_threshold,
        token=token,
        on_progress=on_progress,
    )


__all__ = ["create_chapter_summarizer", "create_summarizer"]
