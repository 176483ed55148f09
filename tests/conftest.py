# tests/conftest.py
"""
Root conftest - shared fixtures for all test modules.

No test touches the network or the real user workspace: every test runs
against a temporary .bookdigest/ directory with API-key env vars cleared.
Test doubles and builders live in tests/fakes.py.

Test Tiers (for CI/CD optimization):
=====================================
- tier1: Critical path tests - pure logic, no I/O (<10s)
         Run: pytest -m tier1
- tier2: Unit tests with mocks - MockTransport HTTP, temp files, CliRunner (<1min)
         Run: pytest -m "tier1 or tier2"

Recommended CI Configuration:
- Every commit:    pytest -m tier1
- PR merge:        pytest
"""

from __future__ import annotations

import pytest

from bookdigest.core.paths import WORKSPACE_ENV, BookdigestPaths
from bookdigest.llm.credentials import GENERIC_API_KEY_ENV
from bookdigest.llm.providers import PROVIDERS
from tests.fakes import THREE_CHAPTER_BOOK, THREE_CHAPTER_TOC, write_epub

# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    """Point the workspace at a temp dir and clear every API-key env var."""
    workspace = tmp_path / ".bookdigest"
    BookdigestPaths.set_workspace(workspace)

    for preset in PROVIDERS.values():
        for env_var in preset.env_vars:
            monkeypatch.delenv(env_var, raising=False)
    monkeypatch.delenv(GENERIC_API_KEY_ENV, raising=False)
    monkeypatch.delenv(WORKSPACE_ENV, raising=False)

    yield workspace

    BookdigestPaths.reset()


@pytest.fixture
def user_config(isolated_workspace):
    """Path of the (not yet existing) user config file."""
    return isolated_workspace / "config.yaml"


# =============================================================================
# Books
# =============================================================================


@pytest.fixture
def sample_epub(tmp_path):
    """Three chapters: two anchored in one file, one whole-file entry, plus front matter."""
    return write_epub(tmp_path / "sample.epub", THREE_CHAPTER_BOOK, THREE_CHAPTER_TOC)


@pytest.fixture
def sample_markdown(tmp_path):
    path = tmp_path / "book.md"
    path.write_text(
        "# Chapter 1\n\nCall me Ishmael.\n\n"
        "# Chapter 2\n\nThe Spouter-Inn.\n\n"
        "# Chapter 3\n\nThe Counterpane.\n",
        encoding="utf-8",
    )
    return path
