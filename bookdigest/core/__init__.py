# bookdigest/core/__init__.py
"""
Core building blocks: errors, cancellation, retry, title matching, HTTP.
"""

from bookdigest.core.cancellation import CancellationToken, run_cancellable
from bookdigest.core.exceptions import (
    Cancelled,
    ChapterCallError,
    ConfigurationError,
    EngineStateError,
    IngestionError,
    MalformedResponse,
    RequestRejected,
    SummarizerError,
    TransientFailure,
)
from bookdigest.core.retry import RetryPolicy, retry
from bookdigest.core.similarity import is_match, similarity

__all__ = [
    # Cancellation
    "CancellationToken",
    "run_cancellable",
    # Retry
    "RetryPolicy",
    "retry",
    # Matching
    "is_match",
    "similarity",
    # Errors
    "SummarizerError",
    "ConfigurationError",
    "ChapterCallError",
    "TransientFailure",
    "MalformedResponse",
    "RequestRejected",
    "Cancelled",
    "EngineStateError",
    "IngestionError",
]
