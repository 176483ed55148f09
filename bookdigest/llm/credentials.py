# bookdigest/llm/credentials.py
"""
Centralized credential resolution for LLM providers.

Rules:
- Nothing else reads API-key environment variables directly.
- Resolution order:
  1. Explicit config value
  2. Provider-specific env var
  3. Generic fallback env var
- Fail with actionable errors, before any request is made.
"""

from __future__ import annotations

import os
from typing import Mapping

from bookdigest.core.exceptions import ConfigurationError
from bookdigest.llm.providers import PROVIDERS
from bookdigest.logging.logger import get_logger
from bookdigest.logging.tags import CONFIG

logger = get_logger(__name__)

# Universal fallback (lowest priority)
GENERIC_API_KEY_ENV = "BOOKDIGEST_API_KEY"


class CredentialError(ConfigurationError):
    """Raised when credentials cannot be resolved."""

    pass


def provider_env_vars(provider: str) -> list[str]:
    preset = PROVIDERS.get(provider.lower())
    return list(preset.env_vars) if preset else []


def resolve_api_key(
    *,
    provider: str,
    config: Mapping[str, str | None] | None = None,
) -> str:
    """
    Resolve API key for a given LLM provider.

    Parameters
    ----------
    provider:
        Logical provider name (e.g. "openai", "openrouter").
    config:
        Optional config mapping. If it contains a non-empty "api_key",
        that value is used first.

    Returns
    -------
    str
        Resolved API key.

    Raises
    ------
    CredentialError
        If no API key could be resolved.
    """
    cfg = config or {}

    # 1. Explicit config
    api_key = cfg.get("api_key")
    if api_key and api_key.strip():
        logger.debug(f"{CONFIG} Using API key from explicit config for provider '{provider}'")
        return api_key.strip()

    # 2. Provider-specific env vars
    env_vars = provider_env_vars(provider)
    for env_name in env_vars:
        value = os.getenv(env_name, "").strip()
        if value:
            logger.debug(f"{CONFIG} Using API key from env '{env_name}' for provider '{provider}'")
            return value

    # 3. Generic fallback
    fallback = os.getenv(GENERIC_API_KEY_ENV, "").strip()
    if fallback:
        logger.debug(
            f"{CONFIG} Using API key from env '{GENERIC_API_KEY_ENV}' for provider '{provider}'"
        )
        return fallback

    expected_str = ", ".join(env_vars + [GENERIC_API_KEY_ENV])
    raise CredentialError(
        f"API key for provider '{provider}' not found. "
        f"Set one of: {expected_str}, or run 'bookdigest config set provider.api_key <key>'."
    )


__all__ = ["CredentialError", "GENERIC_API_KEY_ENV", "provider_env_vars", "resolve_api_key"]
