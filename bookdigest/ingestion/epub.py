# bookdigest/ingestion/epub.py
"""
EPUB -> chapters.

ebooklib loads the package: manifest, spine and the table of contents (NCX,
or the EPUB 3 nav document when there is no NCX). Spine documents are then
cut into chapters at the anchors the TOC points to: each line is checked for
the next TOC entry's id="..." and a new chapter starts there. TOC entries
that point at a whole file (no #fragment) take that entire document as one
chapter. Without a TOC, every spine document is a chapter.

Raw XHTML fragments are converted to plain text with BeautifulSoup at the end.
"""

from __future__ import annotations

import io
import posixpath
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Union
from urllib.parse import unquote

import ebooklib
from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from ebooklib import epub

from bookdigest.core.exceptions import IngestionError
from bookdigest.ingestion.models import BookDocument
from bookdigest.logging.logger import get_logger
from bookdigest.logging.tags import INGEST

logger = get_logger(__name__)

warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

READ_OPTIONS = {"ignore_ncx": False}
WHOLE_FILE = None


@dataclass(frozen=True)
class TocEntry:
    label: str
    path: str  # manifest file name of the target document
    anchor: Optional[str]  # None: the entry covers its whole file


# =============================================================================
# Book helpers
# =============================================================================


def read_book(source: Union[str, Path, bytes]) -> tuple[epub.EpubBook, str]:
    """
    Load an EPUB with ebooklib.

    Returns:
        (book, display name); uploads are named "<upload>"

    Raises:
        IngestionError: Anything ebooklib cannot load
    """
    if isinstance(source, (bytes, bytearray)):
        stream: Union[io.BytesIO, str] = io.BytesIO(source)
        name = "<upload>"
    else:
        stream = str(source)
        name = str(source)

    try:
        return epub.read_epub(stream, READ_OPTIONS), name
    except Exception as e:
        raise IngestionError(f"Invalid EPUB file {name}: {e}") from e


def _flatten_toc(toc: Any) -> Iterable[tuple[str, str]]:
    # ebooklib yields a Link for an empty navMap, else a list of Links and
    # (Section, children) tuples. Only top-level entries become chapters.
    if not isinstance(toc, (list, tuple)):
        return []
    entries = []
    for node in toc:
        if isinstance(node, tuple):
            node = node[0]
        href = getattr(node, "href", "") or ""
        title = (getattr(node, "title", "") or "").strip()
        if href or title:
            entries.append((title, href))
    return entries


def toc_entries(book: epub.EpubBook, known_paths: Iterable[str] = ()) -> list[TocEntry]:
    """
    Top-level TOC entries with hrefs resolved to manifest file names.

    NCX hrefs are relative to the NCX file; nav document hrefs come back
    already resolved, so whichever form names a known document wins.
    """
    known = set(known_paths)
    ncx = next(iter(book.get_items_of_type(ebooklib.ITEM_NAVIGATION)), None)
    base_dir = posixpath.dirname(ncx.file_name) if ncx is not None else ""

    entries: list[TocEntry] = []
    for label, src in _flatten_toc(book.toc):
        href, _, fragment = unquote(src).partition("#")
        path = posixpath.normpath(posixpath.join(base_dir, href))
        if path not in known and posixpath.normpath(href) in known:
            path = posixpath.normpath(href)
        entries.append(TocEntry(label=label, path=path, anchor=fragment or WHOLE_FILE))
    return entries


def spine_documents(book: epub.EpubBook) -> list[tuple[str, str]]:
    """(file name, raw markup) for each spine document, in reading order."""
    documents: list[tuple[str, str]] = []
    for idref, _linear in book.spine:
        item = book.get_item_with_id(idref)
        if item is None:
            logger.warning(f"{INGEST} Spine item {idref} not found in manifest")
            continue
        # Raw markup; EpubHtml.get_content() re-renders the document
        markup = (item.content or b"").decode("utf-8", errors="replace")
        documents.append((item.file_name, markup))
    return documents


def html_to_text(markup: str) -> str:
    """Strip markup, keeping one line per block of text."""
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(["script", "style", "head"]):
        tag.decompose()
    lines = (line.strip() for line in soup.get_text("\n").splitlines())
    return "\n".join(line for line in lines if line)


def _has_anchor(line: str, anchor: str) -> bool:
    return f'id="{anchor}"' in line or f"id='{anchor}'" in line


# =============================================================================
# Conversion
# =============================================================================


def split_spine(documents: list[tuple[str, str]], toc: list[TocEntry]) -> list[str]:
    """
    Cut spine documents into raw chapter markup following TOC anchors.

    Args:
        documents: (file name, markup) pairs in spine order
        toc: Top-level TOC entries

    Content before the first TOC entry is front matter and is dropped.
    """
    if not toc:
        return [markup for _, markup in documents]

    anchors = [entry.anchor for entry in toc]
    known_paths = {path for path, _ in documents}
    chapters: list[str] = []
    current: list[str] = []
    index = -1
    collecting = False

    for path, document in documents:
        # A whole-file entry starts with its document. Entries whose target
        # is not in the spine start at the next document instead.
        whole_file = False
        if index < len(anchors) - 1 and anchors[index + 1] is WHOLE_FILE:
            target = toc[index + 1].path
            if target == path or target not in known_paths:
                if current:
                    chapters.append("\n".join(current))
                    current = []
                index += 1
                collecting = True
                whole_file = True

        for line in document.splitlines():
            if not whole_file and index < len(anchors) - 1:
                next_anchor = anchors[index + 1]
                if next_anchor is not WHOLE_FILE and _has_anchor(line, next_anchor):
                    if current:
                        chapters.append("\n".join(current))
                        current = []
                    index += 1
                    collecting = True

            if collecting:
                current.append(line)

        # A whole-file entry ends with its document.
        if whole_file:
            chapters.append("\n".join(current))
            current = []
            collecting = False

    if current:
        chapters.append("\n".join(current))

    return chapters


def convert_epub(source: Union[str, Path, bytes]) -> BookDocument:
    """
    Convert an EPUB (path or raw bytes) into chapters and a TOC.

    Raises:
        IngestionError: Not a zip archive, missing container/package or files
    """
    book, name = read_book(source)

    documents = spine_documents(book)
    toc = toc_entries(book, (path for path, _ in documents))

    raw_chapters = split_spine(documents, toc)
    chapters = [text for text in (html_to_text(raw) for raw in raw_chapters) if text]

    dropped = len(raw_chapters) - len(chapters)
    if dropped:
        logger.debug(f"{INGEST} Dropped {dropped} empty sections")

    logger.info(f"{INGEST} {name}: {len(chapters)} chapters, {len(toc)} TOC entries")
    return BookDocument(chapters=chapters, toc=[entry.label for entry in toc], source=name)


__all__ = [
    "TocEntry",
    "convert_epub",
    "html_to_text",
    "read_book",
    "spine_documents",
    "split_spine",
    "toc_entries",
]
