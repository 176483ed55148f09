# bookdigest/core/paths.py
"""
Central path management for bookdigest.

All paths are relative to the workspace root, which defaults to
{CWD}/.bookdigest. Override it with the BOOKDIGEST_HOME environment variable
or, in tests, with BookdigestPaths.set_workspace().
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

WORKSPACE_ENV = "BOOKDIGEST_HOME"


class BookdigestPaths:
    """
    Central path management.

    Usage:
        from bookdigest.core.paths import BookdigestPaths

        config_path = BookdigestPaths.config()

        # Override workspace for testing
        BookdigestPaths.set_workspace("/tmp/test_bookdigest")
    """

    _workspace_override: Optional[Path] = None

    @classmethod
    def set_workspace(cls, path: Optional[str | Path]) -> None:
        """Override the workspace root. Pass None to reset to default."""
        if path is None:
            cls._workspace_override = None
        else:
            cls._workspace_override = Path(path)

    @classmethod
    def reset(cls) -> None:
        """Reset to default workspace. Useful in tests."""
        cls._workspace_override = None

    @classmethod
    def workspace(cls) -> Path:
        """
        The workspace directory.

        Priority: set_workspace() override, $BOOKDIGEST_HOME, {CWD}/.bookdigest
        """
        if cls._workspace_override is not None:
            return cls._workspace_override

        env_home = os.getenv(WORKSPACE_ENV)
        if env_home:
            return Path(env_home).expanduser()

        return Path.cwd() / ".bookdigest"

    @classmethod
    def config(cls) -> Path:
        """User config file: {workspace}/config.yaml"""
        return cls.workspace() / "config.yaml"


__all__ = ["BookdigestPaths", "WORKSPACE_ENV"]
