# bookdigest/cli/commands/__init__.py
"""CLI command implementations, imported lazily by bookdigest.cli.cli."""
