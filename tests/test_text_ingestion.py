# tests/test_text_ingestion.py
"""Tests for plain-text and Markdown chapter splitting."""

import pytest

from bookdigest.core.exceptions import IngestionError
from bookdigest.ingestion import load_document
from bookdigest.ingestion.text import convert_text, split_markdown, split_plain_text

pytestmark = pytest.mark.tier1


class TestSplitMarkdown:
    def test_splits_on_top_level_headings(self):
        chapters, toc = split_markdown("# One\n\nFirst.\n\n# Two\n\nSecond.\n")

        assert toc == ["One", "Two"]
        assert chapters == ["# One\n\nFirst.", "# Two\n\nSecond."]

    def test_uses_shallowest_level_present(self):
        content = "## Part A\n\ntext\n\n### detail\n\nmore\n\n## Part B\n\nend\n"

        chapters, toc = split_markdown(content)

        assert toc == ["Part A", "Part B"]
        assert "### detail" in chapters[0]

    def test_subheadings_stay_inside_chapter(self):
        chapters, toc = split_markdown("# Book\n\n## Scene 1\n\nx\n\n## Scene 2\n\ny\n")

        assert toc == ["Book"]
        assert len(chapters) == 1

    def test_preamble_kept_as_leading_section(self):
        chapters, toc = split_markdown("Dedicated to my cat.\n\n# One\n\nStory.\n")

        assert chapters[0] == "Dedicated to my cat."
        assert toc == ["One"]

    def test_frontmatter_removed(self):
        chapters, _ = split_markdown("---\ntitle: Book\n---\n# One\n\nStory.\n")

        assert chapters == ["# One\n\nStory."]

    def test_closing_hashes_stripped_from_title(self):
        _, toc = split_markdown("# One ##\n\ntext\n")
        assert toc == ["One"]

    def test_no_headings_falls_back_to_plain_text(self):
        chapters, toc = split_markdown("CHAPTER I\n\nIt was.\n\nCHAPTER II\n\nIt is.\n")

        assert toc == ["CHAPTER I", "CHAPTER II"]
        assert len(chapters) == 2


class TestSplitPlainText:
    @pytest.mark.parametrize(
        "heading",
        ["Chapter 1", "CHAPTER IV. The Storm", "Chapter Twenty-One", "Part 2", "Book III"],
    )
    def test_heading_styles(self, heading):
        chapters, toc = split_plain_text(f"{heading}\n\nBody text.\n")

        assert toc == [heading]
        assert chapters == [f"{heading}\n\nBody text."]

    def test_long_lines_are_prose(self):
        prose = "Chapter 1 " + "was the longest chapter anyone in the village had ever read aloud " * 2
        chapters, toc = split_plain_text(prose)

        assert toc == []
        assert len(chapters) == 1

    def test_word_starting_with_chapter_keyword_is_not_a_heading(self):
        _, toc = split_plain_text("Bookish people read.\nPartly true.\n")
        assert toc == []

    def test_no_headings_single_chapter(self):
        assert split_plain_text("Just one block of text.\n") == (["Just one block of text."], [])

    def test_blank_text(self):
        assert split_plain_text("   \n") == ([], [])


class TestConvertText:
    def test_markdown_by_suffix(self, sample_markdown):
        document = convert_text(sample_markdown)

        assert document.toc == ["Chapter 1", "Chapter 2", "Chapter 3"]
        assert document.chapters[0] == "# Chapter 1\n\nCall me Ishmael."

    def test_plain_text_file(self, tmp_path):
        path = tmp_path / "book.txt"
        path.write_text("Chapter 1\nAlpha.\nChapter 2\nBeta.\n", encoding="utf-8")

        document = load_document(path)

        assert document.chapters == ["Chapter 1\nAlpha.", "Chapter 2\nBeta."]
        assert document.total_chars == len("Chapter 1\nAlpha.") + len("Chapter 2\nBeta.")

    def test_force_markdown(self, tmp_path):
        path = tmp_path / "book.txt"
        path.write_text("# A\n\nx\n\n# B\n\ny\n", encoding="utf-8")

        assert convert_text(path, markdown=True).toc == ["A", "B"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.md"
        path.write_text("\n\n", encoding="utf-8")

        with pytest.raises(IngestionError, match="no text"):
            convert_text(path)

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "binary.txt"
        path.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(IngestionError, match="Cannot read"):
            convert_text(path)

    def test_to_dict(self, sample_markdown):
        data = convert_text(sample_markdown).to_dict()
        assert set(data) == {"chapters", "toc"}
