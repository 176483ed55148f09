# bookdigest/__init__.py
"""
bookdigest - progressive, chapter-bounded book summaries.

Feeds a book to an OpenAI-compatible chat model one chapter at a time,
carrying a running summary forward, skipping front matter, and optionally
stopping at a chosen chapter.

Quick Start:
    >>> import asyncio
    >>> from bookdigest import load_config, load_document, create_summarizer
    >>> book = load_document("moby-dick.epub")
    >>> engine = create_summarizer(book.chapters, load_config(), stop_target="Chapter 3")
    >>> print(asyncio.run(engine.run()))

Architecture:
    bookdigest/
    ├── core/            # Errors, cancellation, retry, title matching, HTTP
    ├── llm/             # Provider presets, credentials, chat client
    ├── summarization/   # Chapter call + progressive engine
    ├── ingestion/       # EPUB / text -> chapters
    ├── config/          # YAML + pydantic settings
    ├── api/             # FastAPI conversion service
    └── cli/             # typer CLI
"""

__version__ = "0.3.0"

from bookdigest.config.loader import load_config
from bookdigest.core.cancellation import CancellationToken
from bookdigest.core.exceptions import (
    Cancelled,
    ConfigurationError,
    MalformedResponse,
    SummarizerError,
    TransientFailure,
)
from bookdigest.ingestion import BookDocument, load_document
from bookdigest.summarization import (
    ChapterRecord,
    EngineState,
    ProgressiveSummarizer,
    create_summarizer,
)

__all__ = [
    "__version__",
    # Entry points
    "create_summarizer",
    "load_config",
    "load_document",
    # Types
    "BookDocument",
    "CancellationToken",
    "ChapterRecord",
    "EngineState",
    "ProgressiveSummarizer",
    # Errors
    "SummarizerError",
    "ConfigurationError",
    "TransientFailure",
    "MalformedResponse",
    "Cancelled",
]
