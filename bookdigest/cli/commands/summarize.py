# bookdigest/cli/commands/summarize.py
"""
Summarize command.

Usage:
    bookdigest summarize book.epub                       # Whole book
    bookdigest summarize book.epub --stop-at "Chapter 7" # Up to a chapter
    bookdigest summarize book.epub --choose              # Pick the chapter from the TOC
    bookdigest summarize book.md -o summary.md           # Write markdown to a file

Ctrl-C cancels the run: the in-flight request is aborted and the command
exits with status 130.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from pathlib import Path
from typing import Any, Optional

import typer

from bookdigest.cli.ui import ui
from bookdigest.config.loader import load_config
from bookdigest.config.schema import BookdigestConfig
from bookdigest.core.exceptions import Cancelled, ConfigurationError, IngestionError, SummarizerError
from bookdigest.ingestion import BookDocument, load_document
from bookdigest.logging.logger import configure_logging, get_logger
from bookdigest.logging.tags import CLI
from bookdigest.summarization.engine import ProgressiveSummarizer
from bookdigest.summarization.factory import create_summarizer

logger = get_logger(__name__)

EXIT_CANCELLED = 130


# =============================================================================
# Helpers
# =============================================================================


def _build_overrides(
    provider: Optional[str],
    model: Optional[str],
    context_mode: Optional[str],
) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if provider:
        # A different provider must not inherit the configured endpoint or key.
        overrides["provider"] = {"name": provider, "base_url": None, "model": None, "api_key": None}
    if model:
        overrides.setdefault("provider", {})["model"] = model
    if context_mode:
        overrides["engine"] = {"context_mode": context_mode}
    return overrides


def _load_config_safe(overrides: dict[str, Any]) -> BookdigestConfig:
    """Load config or exit with a helpful message."""
    try:
        return load_config(overrides=overrides)
    except ConfigurationError as e:
        ui.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


def _load_document_safe(path: Path) -> BookDocument:
    try:
        return load_document(path)
    except IngestionError as e:
        ui.error(str(e))
        raise typer.Exit(1)


def _choose_stop_target(document: BookDocument) -> Optional[str]:
    if not document.toc:
        ui.warning("This book has no table of contents", "summarizing every chapter")
        return None

    return ui.choose_stop_target(document.toc)


def _install_interrupt(loop: asyncio.AbstractEventLoop, engine: ProgressiveSummarizer) -> bool:
    try:
        loop.add_signal_handler(signal.SIGINT, engine.cancel)
        return True
    except (NotImplementedError, RuntimeError, ValueError):
        # Not the main thread, or the platform has no loop signal support.
        logger.debug(f"{CLI} Ctrl-C cancellation unavailable on this platform")
        return False


async def _run_with_progress(engine: ProgressiveSummarizer, interval: float) -> str:
    """Run the engine while sampling its progress every `interval` seconds."""
    loop = asyncio.get_running_loop()
    interrupt = _install_interrupt(loop, engine)
    total = engine.total_chapters

    try:
        task = asyncio.ensure_future(engine.run())
        with ui.progress("Summarizing", total=1.0) as update:
            while not task.done():
                chapter = min(engine.cursor + 1, max(total, 1))
                update(engine.get_progress(), description=f"Chapter {chapter}/{total}")
                await asyncio.wait({task}, timeout=interval)
            update(engine.get_progress(), description="Summarizing")
        return task.result()
    finally:
        if interrupt:
            loop.remove_signal_handler(signal.SIGINT)
        await engine.aclose()


def _show_results(engine: ProgressiveSummarizer, markdown: str, output: Optional[Path]) -> None:
    records = engine.records
    if not records:
        ui.warning("No chapters were summarized")
        return

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(markdown + "\n", encoding="utf-8")
        ui.success(f"Wrote {len(records)} chapter summaries to {output}")
        return

    for record in records:
        ui.chapter_summary(record.title, record.summary)
    print()
    ui.success(f"Summarized {len(records)} chapters")


# =============================================================================
# Main Command
# =============================================================================


def command(
    path: Path,
    stop_at: Optional[str] = None,
    choose: bool = False,
    output: Optional[Path] = None,
    provider: Optional[str] = None,
    model: Optional[str] = None,
    context_mode: Optional[str] = None,
    verbose: bool = False,
) -> None:
    """
    Summarize a book chapter by chapter.

    Examples:
        bookdigest summarize book.epub
        bookdigest summarize book.epub --stop-at "Chapter 7"
        bookdigest summarize book.epub --choose -o summary.md
    """
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    ui.header("bookdigest", "Progressive chapter summaries")

    # =========================================================================
    # Config, credential and document
    # =========================================================================

    config = _load_config_safe(_build_overrides(provider, model, context_mode))
    document = _load_document_safe(path)

    if not document.chapters:
        ui.warning(f"No chapters found in {path}")
        raise typer.Exit(1)

    if choose and not stop_at:
        stop_at = _choose_stop_target(document)

    try:
        engine = create_summarizer(
            document.chapters,
            config,
            stop_target=stop_at,
            table_of_contents=document.toc,
        )
    except ConfigurationError as e:
        ui.error(str(e))
        raise typer.Exit(1)

    ui.info(
        f"{len(document.chapters)} chapters · {config.provider.name} "
        f"({config.provider.resolved_model()})"
        + (f" · stop at '{stop_at}'" if stop_at else "")
    )

    # =========================================================================
    # Run
    # =========================================================================

    try:
        markdown = asyncio.run(_run_with_progress(engine, config.engine.progress_interval))
    except Cancelled:
        done = len(engine.records)
        ui.info(f"Summarization cancelled ({done} chapters completed).")
        raise typer.Exit(EXIT_CANCELLED)
    except SummarizerError as e:
        ui.error(f"Summarization failed: {e}")
        done = len(engine.records)
        if done:
            ui.info(f"{done} chapters were summarized before the failure.")
        raise typer.Exit(1)

    _show_results(engine, markdown, output)
