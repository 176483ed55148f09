# bookdigest/api/__init__.py
"""HTTP service for bookdigest."""

from bookdigest.api.app import create_app

__all__ = ["create_app"]
