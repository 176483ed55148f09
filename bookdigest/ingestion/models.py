# bookdigest/ingestion/models.py
"""Ingestion output: ordered chapter texts plus the book's table of contents."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class BookDocument:
    """
    A book ready for summarization.

    chapters and toc are independent lists: the TOC is forwarded to the
    chapter call for title normalization, never indexed against chapters.
    """

    chapters: list[str] = field(default_factory=list)
    toc: list[str] = field(default_factory=list)
    source: str | None = None

    @property
    def total_chars(self) -> int:
        return sum(len(chapter) for chapter in self.chapters)

    def to_dict(self) -> dict[str, list[str]]:
        return {"chapters": list(self.chapters), "toc": list(self.toc)}


__all__ = ["BookDocument"]
