# bookdigest/llm/__init__.py
"""
LLM access for bookdigest: provider presets, credentials, chat client.
"""

from __future__ import annotations

from bookdigest.llm.chat import AsyncChatClient, Message
from bookdigest.llm.credentials import CredentialError, resolve_api_key
from bookdigest.llm.providers import PROVIDERS, ProviderPreset, available_providers, get_provider

__all__ = [
    # Client
    "AsyncChatClient",
    "Message",
    # Credentials
    "CredentialError",
    "resolve_api_key",
    # Providers
    "PROVIDERS",
    "ProviderPreset",
    "available_providers",
    "get_provider",
]
