# bookdigest/summarization/parsing.py
"""
Parsing of chapter-call replies.

Models wrap their JSON in a markdown code fence more often than not. The
first ```json (or bare ```) block wins; a reply that is itself a bare JSON
object is accepted too. Anything else is a MalformedResponse.
"""

from __future__ import annotations

import json
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from bookdigest.core.exceptions import MalformedResponse
from bookdigest.summarization.models import ChapterOutcome, ChapterResult, NotAChapter

_FENCE_RE = re.compile(r"```(?:json|JSON)?[ \t]*\r?\n?(.*?)```", re.DOTALL)


class ChapterReply(BaseModel):
    """Shape of the JSON object the model is asked to return."""

    is_chapter: bool
    title: str = ""
    summary: str = ""
    is_stop_target: bool = False

    model_config = ConfigDict(extra="ignore")


def extract_json_block(text: str) -> Optional[str]:
    """
    Locate the JSON payload in a raw reply.

    Returns:
        The fenced block contents, the whole reply if it is a bare JSON
        object, or None.
    """
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()

    stripped = text.strip()
    if stripped.startswith("{") and stripped.endswith("}"):
        return stripped

    return None


def parse_chapter_response(raw: str) -> ChapterOutcome:
    """
    Turn a raw model reply into a ChapterOutcome.

    A "chapter" whose title and summary are both blank carries no
    information and is treated as NotAChapter.

    Raises:
        MalformedResponse: No JSON block, invalid JSON, or wrong shape
    """
    block = extract_json_block(raw or "")
    if block is None:
        raise MalformedResponse("No JSON block found in model response", raw=raw)

    try:
        data = json.loads(block)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Invalid JSON in model response: {e}", raw=raw) from e

    if not isinstance(data, dict):
        raise MalformedResponse(
            f"Expected a JSON object, got {type(data).__name__}", raw=raw
        )

    try:
        reply = ChapterReply.model_validate(data)
    except ValidationError as e:
        raise MalformedResponse(f"Unexpected response shape: {e}", raw=raw) from e

    if not reply.is_chapter:
        return NotAChapter()

    title = reply.title.strip()
    summary = reply.summary.strip()
    if not title and not summary:
        return NotAChapter()

    return ChapterResult(title=title, summary=summary, is_stop_target=reply.is_stop_target)


__all__ = ["ChapterReply", "extract_json_block", "parse_chapter_response"]
