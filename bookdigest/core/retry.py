# bookdigest/core/retry.py
"""
Exponential-backoff retry for async operations.

Only TransientFailure is retried. Everything else, Cancelled included,
propagates on first occurrence. The backoff sleep races the cancellation
token, so a cancel during the wait stops the next attempt from starting.

Usage:
    result = await retry(
        lambda: summarizer(request, token),
        max_attempts=3,
        initial_delay=1.0,
        token=token,
    )

Delays: initial_delay * 2 ** attempt, attempt being the zero-based index of
the attempt that just failed (1s, 2s, 4s, ... with the defaults).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from bookdigest.core.cancellation import CancellationToken, run_cancellable
from bookdigest.core.exceptions import TransientFailure
from bookdigest.logging.logger import get_logger
from bookdigest.logging.tags import RETRY

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_DELAY = 1.0


@dataclass(frozen=True)
class RetryPolicy:
    """Retry parameters, as configured under `retry:`."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    initial_delay: float = DEFAULT_INITIAL_DELAY
    max_delay: Optional[float] = None


def calculate_backoff(attempt: int, initial_delay: float, max_delay: float | None = None) -> float:
    """Calculate exponential backoff delay."""
    delay = initial_delay * (2**attempt)
    if max_delay is not None:
        return min(delay, max_delay)
    return delay


async def retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    max_delay: float | None = None,
    token: CancellationToken | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Invoke `operation` until it succeeds or the attempt budget runs out.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt
        max_attempts: Total number of invocations allowed (>= 1)
        initial_delay: Delay in seconds after the first failure
        max_delay: Optional cap on any single delay
        token: Cancellation token observed before each attempt and during sleeps
        sleep: Sleep coroutine (injectable for tests)

    Returns:
        The first successful result

    Raises:
        TransientFailure: The last failure, once attempts are exhausted
        Cancelled: If the token fires before an attempt or during a backoff
        Exception: Any non-transient error, unchanged, on first occurrence
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    for attempt in range(max_attempts):
        if token is not None:
            token.raise_if_cancelled()

        try:
            return await operation()
        except TransientFailure as e:
            if attempt + 1 >= max_attempts:
                logger.warning(f"{RETRY} Giving up after {max_attempts} attempts: {e}")
                raise

            delay = calculate_backoff(attempt, initial_delay, max_delay)
            logger.info(
                f"{RETRY} Attempt {attempt + 1}/{max_attempts} failed ({e}), "
                f"retrying in {delay:.1f}s"
            )
            await run_cancellable(sleep(delay), token)

    # Unreachable: the loop either returns or raises.
    raise AssertionError("retry loop exited without a result")


async def retry_with_policy(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    token: CancellationToken | None = None,
) -> T:
    """retry() with parameters taken from a RetryPolicy."""
    return await retry(
        operation,
        max_attempts=policy.max_attempts,
        initial_delay=policy.initial_delay,
        max_delay=policy.max_delay,
        token=token,
    )


__all__ = [
    "DEFAULT_INITIAL_DELAY",
    "DEFAULT_MAX_ATTEMPTS",
    "RetryPolicy",
    "calculate_backoff",
    "retry",
    "retry_with_policy",
]
