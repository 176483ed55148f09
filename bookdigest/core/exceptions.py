# bookdigest/core/exceptions.py
"""
All exceptions raised by bookdigest.

Hierarchy:
    SummarizerError
    ├── ConfigurationError - Missing credentials, invalid settings
    ├── ChapterCallError - One chapter summarization call failed
    │   ├── TransientFailure - Network/provider hiccup, safe to retry
    │   ├── MalformedResponse - Model output could not be parsed
    │   └── RequestRejected - Provider refused the request itself
    ├── Cancelled - The user cancelled the run
    ├── EngineStateError - Engine used out of order
    └── IngestionError - Document could not be split into chapters

Only TransientFailure is retried. Cancelled is not a failure from the user's
point of view; front ends should report it without an error banner.
"""

from __future__ import annotations


class SummarizerError(Exception):
    """
    Base exception for all bookdigest errors.

    Examples:
        >>> try:
        ...     summary = await engine.run()
        ... except SummarizerError as e:
        ...     print(f"Summarization failed: {e}")
    """

    pass


class ConfigurationError(SummarizerError):
    """
    Configuration or credential problem.

    Raised before any network activity begins, for example:
    - Missing API key
    - Unknown provider name
    - Invalid config file
    """

    pass


# =============================================================================
# Chapter Call Errors
# =============================================================================


class ChapterCallError(SummarizerError):
    """A single chapter summarization call failed."""

    pass


class TransientFailure(ChapterCallError):
    """Network or provider-side failure (timeouts, 429, 5xx). Retryable."""

    pass


class MalformedResponse(ChapterCallError):
    """
    The model replied, but not with the structured result we asked for.

    Not retried: a broken response contract is unlikely to fix itself.
    """

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


class RequestRejected(ChapterCallError):
    """Provider refused the request (bad model name, invalid payload)."""

    pass


# =============================================================================
# Control Flow
# =============================================================================


class Cancelled(SummarizerError):
    """The run was cancelled by the user."""

    def __init__(self, message: str = "Summarization cancelled"):
        super().__init__(message)


class EngineStateError(SummarizerError):
    """The engine was asked to do something its current state forbids."""

    pass


# =============================================================================
# Ingestion
# =============================================================================


class IngestionError(SummarizerError):
    """The input document could not be converted into chapters."""

    pass


__all__ = [
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
