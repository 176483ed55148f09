# bookdigest/ingestion/text.py
"""
Plain text and Markdown -> chapters.

Markdown is split on the shallowest heading level present (# or ##). Plain
text is split on lines that look like chapter headings ("Chapter 12",
"CHAPTER IV. The Storm"). A document with no headings is one chapter.

Each chapter keeps its heading line so the model sees the title; text before
the first heading is kept as a leading section (usually front matter, which
the chapter call recognizes and skips).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Union

from bookdigest.core.exceptions import IngestionError
from bookdigest.ingestion.models import BookDocument
from bookdigest.logging.logger import get_logger
from bookdigest.logging.tags import INGEST

logger = get_logger(__name__)

MARKDOWN_HEADING = re.compile(r"^(#{1,2})\s+(.+?)\s*#*\s*$", re.MULTILINE)
_NUMBER_WORDS = (
    r"one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve|thirteen|"
    r"fourteen|fifteen|sixteen|seventeen|eighteen|nineteen|twenty|thirty|forty|"
    r"fifty|sixty|seventy|eighty|ninety|hundred"
)
CHAPTER_HEADING = re.compile(
    rf"^[ \t]*((?:chapter|part|book)\s+(?:\d+|[ivxlcdm]+|(?:{_NUMBER_WORDS})(?:-\w+)?)\b.*)$",
    re.MULTILINE | re.IGNORECASE,
)
_FRONTMATTER = re.compile(r"^---\s*\n.*?\n---\s*\n", re.DOTALL)


def _split(content: str, spans: list[tuple[int, str]]) -> tuple[list[str], list[str]]:
    """Cut content at heading offsets. Returns (chapters, titles)."""
    chapters: list[str] = []

    preamble = content[: spans[0][0]].strip()
    if preamble:
        chapters.append(preamble)

    for i, (start, _) in enumerate(spans):
        end = spans[i + 1][0] if i + 1 < len(spans) else len(content)
        section = content[start:end].strip()
        if section:
            chapters.append(section)

    return chapters, [title for _, title in spans]


def split_markdown(content: str) -> tuple[list[str], list[str]]:
    """Split markdown on its shallowest heading level."""
    content = _FRONTMATTER.sub("", content, count=1)
    matches = list(MARKDOWN_HEADING.finditer(content))
    if not matches:
        return split_plain_text(content)

    level = min(len(m.group(1)) for m in matches)
    spans = [(m.start(), m.group(2).strip()) for m in matches if len(m.group(1)) == level]
    return _split(content, spans)


def split_plain_text(content: str) -> tuple[list[str], list[str]]:
    """Split plain text on "Chapter N" style heading lines."""
    # Headings are short lines; long lines starting with "Chapter" are prose.
    spans = [
        (m.start(), m.group(1).strip())
        for m in CHAPTER_HEADING.finditer(content)
        if len(m.group(1).strip()) <= 80
    ]
    if not spans:
        text = content.strip()
        return ([text] if text else []), []
    return _split(content, spans)


def convert_text(source: Union[str, Path], markdown: bool | None = None) -> BookDocument:
    """
    Convert a .txt or .md file into chapters and a TOC.

    Args:
        source: Path to the file
        markdown: Force markdown handling; by default decided by suffix

    Raises:
        IngestionError: If the file cannot be read or is empty
    """
    path = Path(source)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IngestionError(f"Cannot read {path}: {e}") from e

    if markdown is None:
        markdown = path.suffix.lower() in (".md", ".markdown")

    chapters, toc = split_markdown(content) if markdown else split_plain_text(content)
    if not chapters:
        raise IngestionError(f"{path} contains no text")

    logger.info(f"{INGEST} {path}: {len(chapters)} chapters, {len(toc)} headings")
    return BookDocument(chapters=chapters, toc=toc, source=str(path))


__all__ = ["convert_text", "split_markdown", "split_plain_text"]
