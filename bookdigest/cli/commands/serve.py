# bookdigest/cli/commands/serve.py
"""
Serve command: run the conversion API with uvicorn.

Usage:
    bookdigest serve
    bookdigest serve --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import uvicorn

from bookdigest.cli.ui import ui
from bookdigest.logging.logger import get_logger
from bookdigest.logging.tags import CLI

logger = get_logger(__name__)

APP_PATH = "bookdigest.api.app:app"


def command(host: str = "127.0.0.1", port: int = 8080, reload: bool = False) -> None:
    """Start the REST API server."""
    ui.header("bookdigest API", f"http://{host}:{port}  ·  docs at /docs")
    logger.info(f"{CLI} Starting API server on {host}:{port}")
    uvicorn.run(APP_PATH, host=host, port=port, reload=reload)
