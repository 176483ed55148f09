# bookdigest/core/http.py
"""
HTTP client factory and error mapping for LLM provider calls.

Usage:
    from bookdigest.core.http import create_async_api_client, raise_for_status

    async with create_async_api_client(
        base_url="https://openrouter.ai/api/v1",
        api_key=key,
        timeout_type="chat",
    ) as client:
        response = await client.post("/chat/completions", json=payload)
        raise_for_status(response, provider="openrouter", endpoint="/chat/completions")

Every failure is turned into a structured APIError; is_transient() tells the
caller whether retrying could help.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from bookdigest.logging.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# Errors
# =============================================================================


@dataclass
class APIError(Exception):
    """
    Structured API error with details.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code (if available)
        provider: API provider name (e.g., "openai", "openrouter")
        endpoint: API endpoint that failed
        details: Additional error details from the API response
        original_error: The original exception that caused this error
    """

    message: str
    status_code: Optional[int] = None
    provider: Optional[str] = None
    endpoint: Optional[str] = None
    details: Optional[str] = None
    original_error: Optional[Exception] = None

    def __str__(self) -> str:
        parts = [self.message]

        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")

        if self.details:
            parts.append(f"- {self.details}")

        return " ".join(parts)


class RateLimitError(APIError):
    """Raised when API rate limit is exceeded."""

    pass


class AuthenticationError(APIError):
    """Raised when API authentication fails."""

    pass


class ModelNotFoundError(APIError):
    """Raised when requested model doesn't exist."""

    pass


class ServerError(APIError):
    """Raised on 5xx responses."""

    pass


class APIConnectionError(APIError):
    """Raised when the provider could not be reached or timed out."""

    pass


# =============================================================================
# Default Configuration
# =============================================================================

DEFAULT_TIMEOUTS = {
    "default": 30.0,
    "chat": 120.0,  # LLM generation can be slow
    "health_check": 5.0,
}

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# 408 Request Timeout, 409 Conflict, 425 Too Early, 429 Too Many Requests
TRANSIENT_STATUS_CODES = frozenset({408, 409, 425, 429})


# =============================================================================
# Client Factory
# =============================================================================


def create_async_api_client(
    base_url: str,
    api_key: Optional[str] = None,
    timeout: Optional[float] = None,
    timeout_type: str = "default",
    headers: Optional[Dict[str, str]] = None,
    auth_header: str = "Authorization",
    auth_scheme: str = "Bearer",
    **kwargs: Any,
) -> httpx.AsyncClient:
    """
    Create an async HTTP client for API calls.

    Args:
        base_url: Base URL for the API
        api_key: API key for authentication (optional)
        timeout: Request timeout in seconds (or use timeout_type)
        timeout_type: Preset timeout type ("default", "chat", "health_check")
        headers: Additional headers to include
        auth_header: Header name for authentication
        auth_scheme: Authentication scheme
        **kwargs: Additional arguments passed to httpx.AsyncClient
            (e.g. transport= for tests)

    Returns:
        Configured httpx.AsyncClient
    """
    if timeout is None:
        timeout = DEFAULT_TIMEOUTS.get(timeout_type, DEFAULT_TIMEOUTS["default"])

    final_headers = dict(DEFAULT_HEADERS)

    if api_key:
        final_headers[auth_header] = f"{auth_scheme} {api_key}"

    if headers:
        final_headers.update(headers)

    client = httpx.AsyncClient(
        base_url=base_url,
        headers=final_headers,
        timeout=timeout,
        **kwargs,
    )

    logger.debug(f"Created async HTTP client for {base_url} (timeout={timeout}s)")

    return client


# =============================================================================
# Error Handling
# =============================================================================


def _error_details(response: httpx.Response) -> Optional[str]:
    """Pull a readable message out of an error response body."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] if response.text else None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        if data.get("message"):
            return str(data["message"])
    return None


def handle_api_error(
    exc: Exception,
    provider: str = "unknown",
    endpoint: str = "",
) -> APIError:
    """
    Convert an httpx exception to a structured APIError.

    Args:
        exc: The original exception
        provider: Name of the API provider
        endpoint: The endpoint that was called

    Returns:
        Appropriate APIError subclass
    """
    if isinstance(exc, APIError):
        return exc

    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        details = _error_details(exc.response)

        if status_code in (401, 403):
            error_cls: type[APIError] = AuthenticationError
            message = f"{provider} authentication failed"
        elif status_code == 429:
            error_cls = RateLimitError
            message = f"{provider} rate limit exceeded"
        elif status_code == 404:
            error_cls = ModelNotFoundError
            message = f"{provider} resource not found"
        elif status_code >= 500:
            error_cls = ServerError
            message = f"{provider} server error"
        else:
            error_cls = APIError
            message = f"{provider} API request failed"

        return error_cls(
            message=message,
            status_code=status_code,
            provider=provider,
            endpoint=endpoint,
            details=details,
            original_error=exc,
        )

    if isinstance(exc, httpx.TimeoutException):
        return APIConnectionError(
            message=f"{provider} request timed out",
            provider=provider,
            endpoint=endpoint,
            details="Consider increasing provider.timeout",
            original_error=exc,
        )

    if isinstance(exc, httpx.TransportError):
        return APIConnectionError(
            message=f"Failed to connect to {provider}",
            provider=provider,
            endpoint=endpoint,
            details=str(exc) or type(exc).__name__,
            original_error=exc,
        )

    return APIError(
        message=f"{provider} request failed: {exc}",
        provider=provider,
        endpoint=endpoint,
        original_error=exc,
    )


def raise_for_status(
    response: httpx.Response,
    provider: str = "unknown",
    endpoint: str = "",
) -> None:
    """
    Check response status and raise appropriate APIError if failed.

    Raises:
        APIError: If the response indicates an error
    """
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise handle_api_error(exc, provider=provider, endpoint=endpoint) from exc


def is_transient(error: APIError) -> bool:
    """True when retrying the same request could plausibly succeed."""
    if isinstance(error, (RateLimitError, ServerError, APIConnectionError)):
        return True
    return error.status_code in TRANSIENT_STATUS_CODES


__all__ = [
    "APIError",
    "APIConnectionError",
    "AuthenticationError",
    "DEFAULT_TIMEOUTS",
    "ModelNotFoundError",
    "RateLimitError",
    "ServerError",
    "create_async_api_client",
    "handle_api_error",
    "is_transient",
    "raise_for_status",
]
