# bookdigest/api/error_handlers.py
"""
API error handling utilities.

Provides a decorator to standardize exception handling across all API routes,
so every route maps failures to HTTP status codes the same way.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

from fastapi import HTTPException

from bookdigest.core.exceptions import ConfigurationError, IngestionError
from bookdigest.logging.logger import get_logger
from bookdigest.logging.tags import API

logger = get_logger(__name__)

T = TypeVar("T")


def handle_api_errors(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Decorator for standardized API error handling.

    Maps exceptions to HTTP status codes:
    - HTTPException -> Re-raised as-is
    - IngestionError, ValueError -> 400 Bad Request
    - ConfigurationError -> 500 (server is misconfigured)
    - Exception -> 500 Internal Server Error

    Usage:
        @router.post("/convertEpubToChapters")
        @handle_api_errors
        async def convert(file: UploadFile):
            ...
    """

    @wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await fn(*args, **kwargs)
        except HTTPException:
            raise
        except (IngestionError, ValueError) as e:
            logger.info(f"{API} Rejected request in {fn.__name__}: {e}")
            raise HTTPException(status_code=400, detail=str(e))
        except ConfigurationError as e:
            logger.error(f"{API} Configuration error in {fn.__name__}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        except Exception as e:
            logger.exception(f"{API} Unexpected error in {fn.__name__}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    return wrapper


__all__ = ["handle_api_errors"]
