# bookdigest/summarization/models.py
"""
Data types passed between the summarization engine and the chapter call.

ChapterOutcome is a tagged variant:
    NotAChapter      - front matter, table of contents, preface...
    ChapterResult    - a genuine chapter with a resolved title and summary
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence, Union


@dataclass(frozen=True)
class ChapterRecord:
    """One summarized chapter, as appended to the engine's record log."""

    title: str
    summary: str

    def render(self) -> str:
        return f"## {self.title}\n\n{self.summary}"


@dataclass(frozen=True)
class NotAChapter:
    """The input text is not narrative content; skip it."""


@dataclass(frozen=True)
class ChapterResult:
    """
    A genuine chapter outcome.

    is_stop_target is the model's own opinion. The engine records it but
    decides stopping itself by matching `title` against the stop target.
    """

    title: str
    summary: str
    is_stop_target: bool = False

    def to_record(self) -> ChapterRecord:
        return ChapterRecord(title=self.title, summary=self.summary)


ChapterOutcome = Union[NotAChapter, ChapterResult]


@dataclass(frozen=True)
class ChapterRequest:
    """Everything a chapter call needs to summarize one chapter."""

    previous_context: str
    chapter_text: str
    stop_target: str | None = None
    table_of_contents: tuple[str, ...] = field(default_factory=tuple)


class EngineState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (EngineState.COMPLETED, EngineState.CANCELLED)


class StepResult(str, Enum):
    CONTINUE = "continue"
    DONE = "done"


def render_records(records: Sequence[ChapterRecord]) -> str:
    """Join records as markdown sections separated by blank lines."""
    return "\n\n".join(record.render() for record in records)


__all__ = [
    "ChapterOutcome",
    "ChapterRecord",
    "ChapterRequest",
    "ChapterResult",
    "EngineState",
    "NotAChapter",
    "StepResult",
    "render_records",
]
