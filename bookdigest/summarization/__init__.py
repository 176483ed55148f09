# bookdigest/summarization/__init__.py
"""
Progressive chapter summarization.

    from bookdigest.summarization import ProgressiveSummarizer, create_summarizer
"""

from bookdigest.summarization.chapter_call import ChapterSummarizer, LLMChapterSummarizer
from bookdigest.summarization.engine import ProgressiveSummarizer
from bookdigest.summarization.factory import create_chapter_summarizer, create_summarizer
from bookdigest.summarization.models import (
    ChapterOutcome,
    ChapterRecord,
    ChapterRequest,
    ChapterResult,
    EngineState,
    NotAChapter,
    StepResult,
    render_records,
)
from bookdigest.summarization.parsing import parse_chapter_response

__all__ = [
    # Engine
    "ProgressiveSummarizer",
    "EngineState",
    "StepResult",
    # Chapter call
    "ChapterSummarizer",
    "LLMChapterSummarizer",
    "ChapterRequest",
    "ChapterOutcome",
    "ChapterResult",
    "NotAChapter",
    "parse_chapter_response",
    # Output
    "ChapterRecord",
    "render_records",
    # Wiring
    "create_chapter_summarizer",
    "create_summarizer",
]
