# bookdigest/summarization/prompts.py
"""
Prompts for progressive chapter summarization.

The model sees the running context, one chapter, the stop target and the
table of contents, and answers with a single fenced JSON object.

Version: v2 - Structured JSON replies with chapter detection
"""

from __future__ import annotations

from bookdigest.llm.chat import Message
from bookdigest.summarization.models import ChapterRequest

SYSTEM_PROMPT = """You are a helpful assistant that summarizes books to help readers quickly grasp the content.
Focus on identifying key plot points, character developments, and important details.
You will be provided the summary of the previous chapters and the full text of the chapter to summarize.

Some inputs are not chapters at all: tables of contents, copyright pages, dedications, prefaces,
acknowledgements, indexes. Recognize those and mark them as not being a chapter."""


CHAPTER_PROMPT = """PREVIOUS CHAPTERS SUMMARY:
{previous_context}

TABLE OF CONTENTS:
{table_of_contents}

STOP TARGET:
{stop_target}

CURRENT CHAPTER:
{chapter_text}

INSTRUCTIONS:
1. Decide whether the current text is a narrative chapter of the book
2. If it is, give its title, using the matching table of contents entry when there is one
3. Summarize it comprehensively, including key plot points and character developments
4. Set is_stop_target to true only if this chapter is the stop target

Return ONLY a JSON object inside a ```json code block:
```json
{{"is_chapter": true, "title": "Chapter title", "summary": "Chapter summary", "is_stop_target": false}}
```

If the text is not a chapter, return:
```json
{{"is_chapter": false}}
```"""

NONE_MARKER = "(none)"


def build_messages(request: ChapterRequest) -> list[Message]:
    """Render the system and user messages for one chapter call."""
    toc = "\n".join(f"- {entry}" for entry in request.table_of_contents)
    user = CHAPTER_PROMPT.format(
        previous_context=request.previous_context.strip() or NONE_MARKER,
        table_of_contents=toc or NONE_MARKER,
        stop_target=(request.stop_target or "").strip() or NONE_MARKER,
        chapter_text=request.chapter_text,
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user},
    ]


__all__ = ["CHAPTER_PROMPT", "SYSTEM_PROMPT", "build_messages"]
