# tests/fakes.py
"""
Test doubles and builders shared across test modules.

    from tests.fakes import ScriptedSummarizer, chapter, write_epub
"""

from __future__ import annotations

import asyncio
import zipfile
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from bookdigest.core.cancellation import CancellationToken
from bookdigest.summarization.models import ChapterOutcome, ChapterRequest, ChapterResult

# =============================================================================
# Scripted Summarizer
# =============================================================================

Step = Union[ChapterOutcome, Exception, Callable[[ChapterRequest], ChapterOutcome]]


class ScriptedSummarizer:
    """
    ChapterSummarizer test double.

    Plays back `script` one entry per call: an outcome is returned, an
    exception is raised, a callable is invoked with the request. When
    `gate` is set, each call blocks on it first (for cancellation tests).
    """

    def __init__(self, script: Sequence[Step], gate: Optional[asyncio.Event] = None):
        self.script = list(script)
        self.gate = gate
        self.requests: list[ChapterRequest] = []
        self.started = 0
        self.cancelled = 0
        self.closed = False

    async def __call__(
        self,
        request: ChapterRequest,
        token: Optional[CancellationToken] = None,
    ) -> ChapterOutcome:
        self.requests.append(request)
        self.started += 1
        try:
            if self.gate is not None:
                await self.gate.wait()
        except asyncio.CancelledError:
            self.cancelled += 1
            raise

        step = self.script.pop(0)
        if isinstance(step, Exception):
            raise step
        if callable(step):
            return step(request)
        return step

    async def aclose(self) -> None:
        self.closed = True


def chapter(title: str, summary: Optional[str] = None, is_stop_target: bool = False) -> ChapterResult:
    return ChapterResult(
        title=title,
        summary=summary if summary is not None else f"Summary of {title}",
        is_stop_target=is_stop_target,
    )


# =============================================================================
# EPUB Builder
# =============================================================================

CONTAINER_XML = """<?xml version="1.0"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""


def _opf(files: Sequence[str], with_ncx: bool) -> str:
    items = "\n".join(
        f'    <item id="doc{i}" href="{name}" media-type="application/xhtml+xml"/>'
        for i, name in enumerate(files)
    )
    if with_ncx:
        items += '\n    <item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>'
    refs = "\n".join(f'    <itemref idref="doc{i}"/>' for i in range(len(files)))
    toc_attr = ' toc="ncx"' if with_ncx else ""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="2.0" unique-identifier="bookid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:title>Sample Book</dc:title>
    <dc:identifier id="bookid">urn:uuid:sample-book</dc:identifier>
  </metadata>
  <manifest>
{items}
  </manifest>
  <spine{toc_attr}>
{refs}
  </spine>
</package>
"""


def _ncx(entries: Sequence[tuple[str, str]]) -> str:
    points = "\n".join(
        f"""    <navPoint id="np{i}" playOrder="{i + 1}">
      <navLabel><text>{label}</text></navLabel>
      <content src="{src}"/>
    </navPoint>"""
        for i, (label, src) in enumerate(entries)
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <navMap>
{points}
  </navMap>
</ncx>
"""


def xhtml(body: str) -> str:
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<html xmlns="http://www.w3.org/1999/xhtml">\n'
        "<head><title>t</title></head>\n"
        "<body>\n"
        f"{body}\n"
        "</body>\n"
        "</html>\n"
    )


def write_epub(
    path: Path,
    documents: dict[str, str],
    toc: Optional[Sequence[tuple[str, str]]] = None,
) -> Path:
    """
    Write a minimal EPUB 2 file.

    documents maps file names (under OEBPS/) to body markup, in spine order;
    toc is a list of (label, src) NCX entries, or None for no NCX.
    """
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("mimetype", "application/epub+zip")
        archive.writestr("META-INF/container.xml", CONTAINER_XML)
        archive.writestr("OEBPS/content.opf", _opf(list(documents), toc is not None))
        if toc is not None:
            archive.writestr("OEBPS/toc.ncx", _ncx(toc))
        for filename, body in documents.items():
            archive.writestr(f"OEBPS/{filename}", xhtml(body))
    return path


THREE_CHAPTER_BOOK = {
    "front.xhtml": '<h1>Contents</h1>\n<p>Chapter 1</p>\n<p>Chapter 2</p>',
    "text.xhtml": (
        '<h2 id="c1">Chapter 1</h2>\n'
        "<p>Ishmael goes to sea.</p>\n"
        '<h2 id="c2">Chapter 2</h2>\n'
        "<p>He meets Queequeg.</p>"
    ),
    "last.xhtml": "<h2>Chapter 3</h2>\n<p>The Pequod sails.</p>",
}

THREE_CHAPTER_TOC = [
    ("Chapter 1", "text.xhtml#c1"),
    ("Chapter 2", "text.xhtml#c2"),
    ("Chapter 3", "last.xhtml"),
]
