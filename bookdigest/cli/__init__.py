# bookdigest/cli/__init__.py
from bookdigest.cli.cli import app

__all__ = ["app"]
