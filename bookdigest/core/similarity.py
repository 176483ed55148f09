# bookdigest/core/similarity.py
"""
Fuzzy chapter-title matching.

Titles are compared after normalization (lower-case, alphanumerics only), so
"Chapter One", "chapter-one" and "CHAPTER  ONE!" are the same chapter. The
threshold is deliberately strict: formatting differences match, paraphrases
and different chapter numbers do not.
"""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein

DEFAULT_THRESHOLD = 0.98


def normalize_title(title: str) -> str:
    """Lower-case and drop every non-alphanumeric character."""
    return "".join(ch for ch in title.lower() if ch.isalnum())


def similarity(a: str, b: str) -> float:
    """
    Similarity ratio of two titles in [0, 1].

    1 - levenshtein(a', b') / max(len(a'), len(b')) on normalized strings.
    Two titles that normalize to nothing are identical.
    """
    left = normalize_title(a)
    right = normalize_title(b)

    longest = max(len(left), len(right))
    if longest == 0:
        return 1.0

    return 1.0 - Levenshtein.distance(left, right) / longest


def is_match(candidate: str, target: str, threshold: float = DEFAULT_THRESHOLD) -> bool:
    """
    Decide whether two chapter titles name the same chapter.

    Examples:
        >>> is_match("Chapter One", "chapter-one")
        True
        >>> is_match("Chapter One", "Chapter Two")
        False
    """
    return similarity(candidate, target) >= threshold


__all__ = ["DEFAULT_THRESHOLD", "is_match", "normalize_title", "similarity"]
