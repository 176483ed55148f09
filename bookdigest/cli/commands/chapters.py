# bookdigest/cli/commands/chapters.py
"""
Chapters command: show how a book will be split before summarizing it.

Usage:
    bookdigest chapters book.epub
"""

from __future__ import annotations

from pathlib import Path

import typer

from bookdigest.cli.ui import ui
from bookdigest.core.exceptions import IngestionError
from bookdigest.core.utils import truncate
from bookdigest.ingestion import load_document

PREVIEW_CHARS = 60


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def command(path: Path) -> None:
    """List a book's table of contents and chapter sizes."""
    try:
        document = load_document(path)
    except IngestionError as e:
        ui.error(str(e))
        raise typer.Exit(1)

    ui.header(path.name, f"{len(document.chapters)} chapters · {document.total_chars:,} characters")

    if document.toc:
        ui.section("Table of contents")
        ui.toc(document.toc)

    ui.section("Chapters")
    ui.chapter_table(
        [
            (i, truncate(_first_line(text), PREVIEW_CHARS), len(text))
            for i, text in enumerate(document.chapters, 1)
        ]
    )
