# bookdigest/core/cancellation.py
"""
Cancellation token shared by the retry layer and the summarization engine.

One capability, two ways to observe it:
    - poll:      token.cancelled / token.raise_if_cancelled()
    - subscribe: token.add_callback(fn) / await token.wait()

Usage:
    token = CancellationToken()

    # Race a unit of work against cancellation
    result = await run_cancellable(client.chat(messages), token)

    # Elsewhere (UI handler, signal handler, another thread)
    token.cancel()

Once cancelled, a token stays cancelled. cancel() may be called from any
thread; waiters on an event loop are woken with call_soon_threadsafe.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Awaitable, Callable, TypeVar

from bookdigest.core.exceptions import Cancelled
from bookdigest.logging.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def _noop() -> None:
    return None


class CancellationToken:
    """Terminal, thread-safe cancellation flag with subscribers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> bool:
        """
        Cancel the token and notify subscribers.

        Returns:
            True if this call performed the cancellation, False if the token
            was already cancelled (subscribers are not notified twice).
        """
        with self._lock:
            if self._cancelled:
                return False
            self._cancelled = True
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.warning(f"Cancellation callback {callback!r} failed: {e}")
        return True

    def add_callback(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Subscribe to cancellation.

        If the token is already cancelled the callback runs immediately.

        Returns:
            A function that removes the subscription.
        """
        with self._lock:
            if not self._cancelled:
                self._callbacks.append(callback)

                def remove() -> None:
                    with self._lock:
                        if callback in self._callbacks:
                            self._callbacks.remove(callback)

                return remove

        callback()
        return _noop

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise Cancelled()

    async def wait(self) -> None:
        """Resolve as soon as the token is cancelled."""
        if self._cancelled:
            return

        loop = asyncio.get_running_loop()
        future: asyncio.Future[None] = loop.create_future()

        def resolve() -> None:
            if not future.done():
                future.set_result(None)

        def wake() -> None:
            if not loop.is_closed():
                loop.call_soon_threadsafe(resolve)

        remove = self.add_callback(wake)
        try:
            await future
        finally:
            remove()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"


async def run_cancellable(
    awaitable: Awaitable[T],
    token: CancellationToken | None = None,
) -> T:
    """
    Await `awaitable`, giving up as soon as `token` is cancelled.

    When cancellation wins the race the work is cancelled and awaited (so an
    in-flight HTTP request is closed) and Cancelled is raised. A result that
    arrives after the token was cancelled is discarded the same way.

    Raises:
        Cancelled: If the token fired before or while the work ran.
    """
    if token is None:
        return await awaitable

    if token.cancelled:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise Cancelled()

    work = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait())

    try:
        done, _ = await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        work.cancel()
        waiter.cancel()
        raise

    if work not in done:
        work.cancel()
        await asyncio.gather(work, return_exceptions=True)
        raise Cancelled()

    waiter.cancel()
    await asyncio.gather(waiter, return_exceptions=True)

    if token.cancelled:
        # Stale completion: the result landed after cancel(); drop it.
        if not work.cancelled():
            work.exception()
        raise Cancelled()

    return work.result()


__all__ = ["CancellationToken", "run_cancellable"]
