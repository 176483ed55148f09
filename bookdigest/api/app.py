# bookdigest/api/app.py
"""
FastAPI application exposing document conversion over HTTP.

Usage:
    uvicorn bookdigest.api.app:app --port 8080
    # or
    bookdigest serve
"""

from __future__ import annotations

from fastapi import FastAPI

from bookdigest import __version__
from bookdigest.api.routes import convert, health


def create_app() -> FastAPI:
    """Build the API application."""
    app = FastAPI(
        title="bookdigest",
        description="Convert e-books into chapters for progressive summarization.",
        version=__version__,
    )
    app.include_router(health.router)
    app.include_router(convert.router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
