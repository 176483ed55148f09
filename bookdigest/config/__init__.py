# bookdigest/config/__init__.py
"""
Configuration for bookdigest: pydantic schema and layered YAML loading.
"""

from bookdigest.config.loader import (
    get_config_source,
    load_config,
    save_user_config,
    set_config_value,
)
from bookdigest.config.schema import (
    BookdigestConfig,
    EngineConfig,
    ProviderConfig,
    RetryConfig,
)

__all__ = [
    "BookdigestConfig",
    "EngineConfig",
    "ProviderConfig",
    "RetryConfig",
    "get_config_source",
    "load_config",
    "save_user_config",
    "set_config_value",
]
