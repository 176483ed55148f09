# bookdigest/config/schema.py
"""
Configuration schema for bookdigest.

This is the SINGLE source of truth for runtime settings.

Schema hierarchy:
- BookdigestConfig: The root config consumed by the CLI and the factory
- ProviderConfig: Which OpenAI-compatible endpoint to call, and how
- RetryConfig: Backoff settings for transient chapter-call failures
- EngineConfig: Progressive summarization engine behavior
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bookdigest.core.retry import RetryPolicy
from bookdigest.llm.providers import PROVIDERS, get_provider

ContextMode = Literal["latest", "cumulative"]


# =============================================================================
# Provider Configuration
# =============================================================================


class ProviderConfig(BaseModel):
    """
    Chat provider settings.

    base_url and model fall back to the provider preset when left empty.

    Example YAML:
        provider:
          name: deepseek
          model: deepseek-chat
          temperature: 0.2
    """

    name: str = Field(default="openai", description="Provider preset name")
    base_url: Optional[str] = Field(default=None, description="Override the preset base URL")
    model: Optional[str] = Field(default=None, description="Override the preset default model")
    api_key: Optional[str] = Field(
        default=None, description="Explicit API key (env vars are used when empty)"
    )
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=1000, gt=0)
    timeout: float = Field(default=120.0, gt=0, description="Request timeout in seconds")

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in PROVIDERS:
            available = ", ".join(sorted(PROVIDERS))
            raise ValueError(f"unknown provider '{v}' (available: {available})")
        return v

    @model_validator(mode="after")
    def validate_endpoint(self) -> "ProviderConfig":
        if not self.resolved_base_url():
            raise ValueError(f"provider '{self.name}' requires provider.base_url")
        if not self.resolved_model():
            raise ValueError(f"provider '{self.name}' requires provider.model")
        return self

    def resolved_base_url(self) -> str:
        return (self.base_url or get_provider(self.name).base_url).rstrip("/")

    def resolved_model(self) -> str:
        return self.model or get_provider(self.name).default_model


# =============================================================================
# Retry Configuration
# =============================================================================


class RetryConfig(BaseModel):
    """Exponential backoff for TransientFailure. Delays are in seconds."""

    max_attempts: int = Field(default=3, ge=1)
    initial_delay: float = Field(default=1.0, ge=0.0)
    max_delay: Optional[float] = Field(default=None, ge=0.0)

    model_config = ConfigDict(extra="forbid")

    def to_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            initial_delay=self.initial_delay,
            max_delay=self.max_delay,
        )


# =============================================================================
# Engine Configuration
# =============================================================================


class EngineConfig(BaseModel):
    """
    Progressive summarization engine settings.

    Example YAML:
        engine:
          context_mode: latest        # or: cumulative
          similarity_threshold: 0.98
          progress_interval: 0.5
    """

    context_mode: ContextMode = Field(
        default="latest",
        description="latest: carry only the newest summary; cumulative: carry all of them",
    )
    similarity_threshold: float = Field(default=0.98, ge=0.0, le=1.0)
    progress_interval: float = Field(
        default=0.5, gt=0, description="Seconds between CLI progress samples"
    )

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# Root
# =============================================================================


class BookdigestConfig(BaseModel):
    """Complete bookdigest configuration."""

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)

    model_config = ConfigDict(extra="forbid")

    def retry_policy(self) -> RetryPolicy:
        return self.retry.to_policy()


__all__ = [
    "BookdigestConfig",
    "ContextMode",
    "EngineConfig",
    "ProviderConfig",
    "RetryConfig",
]
