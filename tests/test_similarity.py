# tests/test_similarity.py
"""Tests for fuzzy chapter-title matching."""

import pytest

from bookdigest.core.similarity import DEFAULT_THRESHOLD, is_match, normalize_title, similarity

pytestmark = pytest.mark.tier1


class TestNormalizeTitle:
    def test_lowercases_and_strips_punctuation(self):
        assert normalize_title("Chapter One: The Beginning!") == "chapteronethebeginning"

    def test_whitespace_and_dashes_removed(self):
        assert normalize_title("  chapter - one  ") == "chapterone"

    def test_keeps_digits(self):
        assert normalize_title("Chapter 12") == "chapter12"

    def test_unicode_letters_kept(self):
        assert normalize_title("Épilogue") == "épilogue"


class TestSimilarity:
    def test_identical_after_normalization(self):
        assert similarity("Chapter One", "CHAPTER  ONE!") == 1.0

    def test_both_empty_are_identical(self):
        assert similarity("", "   ") == 1.0

    def test_one_empty(self):
        assert similarity("", "Chapter") == 0.0

    def test_ratio_uses_longest_string(self):
        # "chapter1" vs "chapter12": one insertion over 9 chars
        assert similarity("Chapter 1", "Chapter 12") == pytest.approx(1 - 1 / 9)

    def test_symmetric(self):
        assert similarity("The Whale", "Whale") == similarity("Whale", "The Whale")


class TestIsMatch:
    """The default threshold only tolerates formatting differences."""

    @pytest.mark.parametrize(
        "candidate,target",
        [
            ("Chapter One", "chapter-one"),
            ("Chapter 3", "CHAPTER 3."),
            ("Loomings", "  loomings "),
        ],
    )
    def test_formatting_differences_match(self, candidate, target):
        assert is_match(candidate, target)

    @pytest.mark.parametrize(
        "candidate,target",
        [
            ("Chapter One", "Chapter Two"),
            ("Chapter 1", "Chapter 2"),
            ("Chapter 1", "Chapter 10"),
            ("The Spouter-Inn", "The Carpet-Bag"),
        ],
    )
    def test_different_chapters_do_not_match(self, candidate, target):
        assert not is_match(candidate, target)

    def test_custom_threshold(self):
        assert not is_match("Chapter 1", "Chapter 12")
        assert is_match("Chapter 1", "Chapter 12", threshold=0.8)

    def test_default_threshold_value(self):
        assert DEFAULT_THRESHOLD == 0.98
