# bookdigest/summarization/engine.py
"""
Progressive summarization engine.

Walks the chapters of a book in order, one chapter call at a time, carrying
the running context forward. Non-narrative sections are skipped, transient
failures are retried with backoff, and the run stops early after the chapter
matching the stop target.

State machine:
    IDLE -> RUNNING -> COMPLETED
                    -> CANCELLED
                    -> FAILED (the failed chapter may be re-attempted)

Usage:
    engine = ProgressiveSummarizer(chapters, summarizer, stop_target="Chapter 3")
    markdown = await engine.run()

    # From a UI timer / another thread
    engine.get_progress()
    engine.cancel()
"""

from __future__ import annotations

import asyncio
import threading
from typing import Callable, Literal, Optional, Sequence

from bookdigest.core.cancellation import CancellationToken, run_cancellable
from bookdigest.core.exceptions import Cancelled, EngineStateError
from bookdigest.core.retry import RetryPolicy, retry_with_policy
from bookdigest.core.similarity import DEFAULT_THRESHOLD, is_match
from bookdigest.logging.logger import get_logger
from bookdigest.logging.tags import ENGINE
from bookdigest.summarization.chapter_call import ChapterSummarizer
from bookdigest.summarization.models import (
    ChapterOutcome,
    ChapterRecord,
    ChapterRequest,
    ChapterResult,
    EngineState,
    StepResult,
    render_records,
)

logger = get_logger(__name__)

ProgressCallback = Callable[[float], None]
CONTEXT_MODES = ("latest", "cumulative")


class ProgressiveSummarizer:
    """
    Sequential, cancellable chapter-by-chapter summarizer.

    Only one step runs at a time. get_progress() and cancel() may be called
    from any thread while a step is in flight.
    """

    def __init__(
        self,
        chapters: Sequence[str],
        summarizer: ChapterSummarizer,
        *,
        stop_target: Optional[str] = None,
        table_of_contents: Optional[Sequence[str]] = None,
        retry_policy: Optional[RetryPolicy] = None,
        context_mode: Literal["latest", "cumulative"] = "latest",
        similarity_threshold: float = DEFAULT_THRESHOLD,
        token: Optional[CancellationToken] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        if context_mode not in CONTEXT_MODES:
            raise ValueError(
                f"context_mode must be one of {', '.join(CONTEXT_MODES)}, got {context_mode!r}"
            )

        self._chapters = tuple(chapters)
        self._summarizer = summarizer
        self._stop_target = (stop_target or "").strip() or None
        self._toc = tuple(table_of_contents or ())
        self._retry_policy = retry_policy or RetryPolicy()
        self._context_mode = context_mode
        self._threshold = similarity_threshold
        self._on_progress = on_progress

        self._lock = threading.Lock()
        self._state = EngineState.IDLE
        self._cursor = 0
        self._context = ""
        self._records: list[ChapterRecord] = []
        self._in_flight = False

        self._token = token or CancellationToken()
        self._unsubscribe = self._token.add_callback(self._on_token_cancelled)

    # ---------------------------------------------------------------------
    # Read-only views
    # ---------------------------------------------------------------------

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def total_chapters(self) -> int:
        return len(self._chapters)

    @property
    def context(self) -> str:
        return self._context

    @property
    def records(self) -> tuple[ChapterRecord, ...]:
        with self._lock:
            return tuple(self._records)

    @property
    def stop_target(self) -> Optional[str]:
        return self._stop_target

    @property
    def token(self) -> CancellationToken:
        return self._token

    def get_progress(self) -> float:
        """Fraction of chapters processed, in [0, 1]."""
        with self._lock:
            if self._state is EngineState.COMPLETED:
                return 1.0
            if not self._chapters:
                return 0.0
            return self._cursor / len(self._chapters)

    def render(self) -> str:
        """Markdown of every record so far, in chapter order."""
        return render_records(self.records)

    # ---------------------------------------------------------------------
    # Control
    # ---------------------------------------------------------------------

    def cancel(self) -> None:
        """
        Cancel the run.

        Aborts the in-flight chapter call and wakes anyone awaiting it.
        Calling it again has no further effect.
        """
        if self._token.cancel():
            logger.info(f"{ENGINE} Cancellation requested at chapter {self._cursor + 1}")

    def _on_token_cancelled(self) -> None:
        with self._lock:
            if self._state is not EngineState.COMPLETED:
                self._state = EngineState.CANCELLED

    async def run(self) -> str:
        """
        Process chapters until done, stopped, cancelled or failed.

        Returns:
            All records rendered as "## title\\n\\nsummary" sections.

        Raises:
            Cancelled: If cancel() was called before or during the run
            ChapterCallError: If a chapter failed after retries
            EngineStateError: If the engine already completed
        """
        logger.info(
            f"{ENGINE} Summarizing {self.total_chapters} chapters"
            + (f" (stop at '{self._stop_target}')" if self._stop_target else "")
        )

        while await self.advance_one_chapter() is StepResult.CONTINUE:
            pass

        logger.info(f"{ENGINE} Done: {len(self._records)} chapters summarized")
        return self.render()

    async def advance_one_chapter(self) -> StepResult:
        """
        Process the chapter at the cursor.

        Returns:
            CONTINUE if more chapters remain, DONE when the book is finished
            or the stop target was reached.

        Raises:
            EngineStateError: Engine completed, or a step is already running
            Cancelled: Cancelled before or during the call; no record is added
            ChapterCallError: The call failed; the cursor stays on this chapter
        """
        with self._lock:
            self._check_can_step()

            if self._cursor >= len(self._chapters):
                self._state = EngineState.COMPLETED
                return StepResult.DONE

            self._in_flight = True
            self._state = EngineState.RUNNING
            index = self._cursor
            request = ChapterRequest(
                previous_context=self._context,
                chapter_text=self._chapters[index],
                stop_target=self._stop_target,
                table_of_contents=self._toc,
            )

        logger.debug(f"{ENGINE} Chapter {index + 1}/{len(self._chapters)}")

        try:
            outcome = await run_cancellable(
                retry_with_policy(
                    lambda: self._summarizer(request, self._token),
                    self._retry_policy,
                    self._token,
                ),
                self._token,
            )
        except asyncio.CancelledError:
            self.cancel()
            raise
        except Cancelled:
            logger.info(f"{ENGINE} Cancelled during chapter {index + 1}")
            raise
        except Exception as e:
            with self._lock:
                if self._state is not EngineState.CANCELLED:
                    self._state = EngineState.FAILED
            logger.error(f"{ENGINE} Chapter {index + 1} failed: {e}")
            raise
        finally:
            with self._lock:
                self._in_flight = False

        result = self._apply(index, outcome)
        if self._on_progress is not None:
            self._notify_progress()
        return result

    async def aclose(self) -> None:
        """Release the summarizer's resources (e.g. its HTTP client)."""
        self._unsubscribe()
        close = getattr(self._summarizer, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "ProgressiveSummarizer":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---------------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------------

    def _check_can_step(self) -> None:
        if self._state is EngineState.COMPLETED:
            raise EngineStateError("Summarization already completed")
        if self._state is EngineState.CANCELLED or self._token.cancelled:
            raise Cancelled()
        if self._in_flight:
            raise EngineStateError("A chapter is already being summarized")

    def _apply(self, index: int, outcome: ChapterOutcome) -> StepResult:
        with self._lock:
            if self._token.cancelled:
                # Completion landed after cancel(); drop it.
                raise Cancelled()

            self._cursor = index + 1
            at_end = self._cursor >= len(self._chapters)

            if not isinstance(outcome, ChapterResult):
                logger.info(f"{ENGINE} Chapter {index + 1}: not a chapter, skipped")
                if at_end:
                    self._state = EngineState.COMPLETED
                    return StepResult.DONE
                return StepResult.CONTINUE

            record = outcome.to_record()
            self._records.append(record)
            self._context = self._next_context(record)
            logger.info(f"{ENGINE} Chapter {index + 1}: '{record.title}' summarized")

            stop = self._is_stop(outcome)
            if stop or at_end:
                if stop:
                    logger.info(f"{ENGINE} Reached stop target '{self._stop_target}'")
                self._state = EngineState.COMPLETED
                return StepResult.DONE
            return StepResult.CONTINUE

    def _is_stop(self, outcome: ChapterResult) -> bool:
        if self._stop_target is None:
            return False
        matched = is_match(outcome.title, self._stop_target, self._threshold)
        if matched != outcome.is_stop_target:
            logger.debug(
                f"{ENGINE} Model stop claim ({outcome.is_stop_target}) overridden "
                f"by title match ({matched}) for '{outcome.title}'"
            )
        return matched

    def _next_context(self, record: ChapterRecord) -> str:
        if self._context_mode == "cumulative" and self._context:
            return f"{self._context}\n\n{record.render()}"
        if self._context_mode == "cumulative":
            return record.render()
        return record.summary

    def _notify_progress(self) -> None:
        progress = self.get_progress()
        try:
            self._on_progress(progress)
        except Exception as e:
            logger.warning(f"{ENGINE} Progress callback failed: {e}")


__all__ = ["CONTEXT_MODES", "ProgressCallback", "ProgressiveSummarizer"]
