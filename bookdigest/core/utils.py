# bookdigest/core/utils.py
"""
Small helpers shared across bookdigest.
"""

from __future__ import annotations

import re
from typing import Any


def extract_path(data: Any, path: str, *, default: Any = None, strict: bool = True) -> Any:
    """
    Extract a value from nested data using dot/bracket notation.

    Args:
        data: The data structure to extract from (dict or list)
        path: Dot-notation path with optional array indices,
              e.g. "choices[0].message.content"
        default: Value to return if path not found (only used when strict=False)
        strict: If True, raises KeyError/IndexError on missing paths

    Examples:
        >>> extract_path({"choices": [{"message": {"content": "hi"}}]}, "choices[0].message.content")
        'hi'
        >>> extract_path({"a": 1}, "b.c", strict=False)
    """
    if not path:
        return data

    parts = [p for p in re.split(r"\.|\[|\]", path) if p]

    current = data
    for part in parts:
        try:
            if isinstance(current, dict):
                current = current[part]
            elif isinstance(current, (list, tuple)):
                current = current[int(part)]
            else:
                if strict:
                    raise KeyError(f"Cannot traverse {type(current).__name__} with key {part!r}")
                return default
        except (KeyError, IndexError, TypeError, ValueError):
            if strict:
                raise
            return default

    return current


def deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Values from `override` take precedence. Nested dicts are merged
    recursively; lists are replaced entirely.

    Examples:
        >>> deep_merge({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"c": 10}})
        {'a': 1, 'b': {'c': 10, 'd': 3}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def truncate(text: str, limit: int, marker: str = "...") -> str:
    """Shorten text for log lines and table cells."""
    if len(text) <= limit:
        return text
    return text[: max(0, limit - len(marker))] + marker


__all__ = ["deep_merge", "extract_path", "truncate"]
