# bookdigest/llm/providers.py
"""
Known OpenAI-compatible chat providers.

Each preset names the base URL, a sensible default model and the environment
variables that may hold its API key. "custom" has no preset URL; the user
must supply provider.base_url in config.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bookdigest.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class ProviderPreset:
    name: str
    label: str
    base_url: str
    default_model: str
    env_vars: tuple[str, ...] = field(default_factory=tuple)


PROVIDERS: dict[str, ProviderPreset] = {
    "openai": ProviderPreset(
        name="openai",
        label="OpenAI",
        base_url="https://api.openai.com/v1",
        default_model="gpt-4o-mini",
        env_vars=("OPENAI_API_KEY",),
    ),
    "deepseek": ProviderPreset(
        name="deepseek",
        label="DeepSeek",
        base_url="https://api.deepseek.com/v1",
        default_model="deepseek-chat",
        env_vars=("DEEPSEEK_API_KEY",),
    ),
    "openrouter": ProviderPreset(
        name="openrouter",
        label="OpenRouter",
        base_url="https://openrouter.ai/api/v1",
        default_model="google/gemini-flash-1.5",
        env_vars=("OPENROUTER_API_KEY",),
    ),
    "custom": ProviderPreset(
        name="custom",
        label="Custom (OpenAI-compatible)",
        base_url="",
        default_model="",
        env_vars=(),
    ),
}


def get_provider(name: str) -> ProviderPreset:
    """Look up a provider preset by name (case-insensitive)."""
    try:
        return PROVIDERS[name.lower()]
    except KeyError:
        available = ", ".join(sorted(PROVIDERS))
        raise ConfigurationError(
            f"Unknown provider '{name}'. Available: {available}"
        ) from None


def available_providers() -> list[str]:
    return sorted(PROVIDERS)


__all__ = ["PROVIDERS", "ProviderPreset", "available_providers", "get_provider"]
