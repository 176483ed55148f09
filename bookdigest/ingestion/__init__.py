# bookdigest/ingestion/__init__.py
"""
Document ingestion: turn a book file into ordered chapter texts plus a TOC.

    from bookdigest.ingestion import load_document

    document = load_document("moby-dick.epub")
    document.chapters, document.toc
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from bookdigest.core.exceptions import IngestionError
from bookdigest.ingestion.epub import convert_epub
from bookdigest.ingestion.models import BookDocument
from bookdigest.ingestion.text import convert_text

SUPPORTED_SUFFIXES = (".epub", ".txt", ".md", ".markdown")


def load_document(path: Union[str, Path]) -> BookDocument:
    """
    Load a book from disk, dispatching on file suffix.

    Raises:
        IngestionError: Missing file, unsupported type, or conversion failure
    """
    p = Path(path)
    if not p.is_file():
        raise IngestionError(f"File not found: {p}")

    suffix = p.suffix.lower()
    if suffix == ".epub":
        return convert_epub(p)
    if suffix in (".txt", ".md", ".markdown"):
        return convert_text(p)

    raise IngestionError(
        f"Unsupported file type '{suffix or p.name}'. Supported: {', '.join(SUPPORTED_SUFFIXES)}"
    )


__all__ = ["BookDocument", "SUPPORTED_SUFFIXES", "convert_epub", "convert_text", "load_document"]
