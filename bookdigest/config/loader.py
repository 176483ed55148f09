# bookdigest/config/loader.py
"""
Layered configuration loading.

Merge strategy:
    1. Package defaults (bookdigest/config/defaults/default.yaml) - always loaded
    2. User config (.bookdigest/config.yaml) - overrides defaults
    3. Explicit overrides (CLI flags) - override both

The merged mapping is validated into a BookdigestConfig, so callers never need
fallback logic.

Usage:
    from bookdigest.config.loader import load_config

    config = load_config()
    config.provider.resolved_model()
    config.engine.context_mode
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from bookdigest.config.schema import BookdigestConfig
from bookdigest.core.config import (
    ConfigNotFoundError,
    ConfigValidationError,
    dump_yaml,
    load_yaml,
)
from bookdigest.core.paths import BookdigestPaths
from bookdigest.core.utils import deep_merge
from bookdigest.logging.logger import get_logger
from bookdigest.logging.tags import CONFIG

logger = get_logger(__name__)

DEFAULTS_PATH = Path(__file__).parent / "defaults" / "default.yaml"


# =============================================================================
# Loading Functions
# =============================================================================


def load_defaults() -> dict[str, Any]:
    """
    Load package defaults.

    Raises:
        ConfigNotFoundError: If the packaged defaults are missing
    """
    defaults = load_yaml(DEFAULTS_PATH)
    logger.debug(f"{CONFIG} Loaded defaults from {DEFAULTS_PATH}")
    return defaults


def load_user_config(path: Optional[Path] = None) -> dict[str, Any] | None:
    """
    Load the user's config file.

    Returns:
        The user mapping, or None if no user config exists

    Raises:
        ConfigParseError: If the file exists but is not valid YAML
    """
    user_path = Path(path) if path else BookdigestPaths.config()

    try:
        data = load_yaml(user_path)
    except ConfigNotFoundError:
        logger.debug(f"{CONFIG} No user config at {user_path}")
        return None

    logger.debug(f"{CONFIG} Loaded user config from {user_path}")
    return data


def validate_config(data: dict[str, Any], path: Optional[Path] = None) -> BookdigestConfig:
    """
    Validate a merged mapping into a BookdigestConfig.

    Raises:
        ConfigValidationError: With every pydantic error folded into one message
    """
    try:
        return BookdigestConfig.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigValidationError(f"Invalid configuration: {problems}", path=path) from e


def load_config_dict(
    path: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Merged, unvalidated configuration mapping (defaults + user + overrides)."""
    merged = load_defaults()

    user_config = load_user_config(path)
    if user_config:
        merged = deep_merge(merged, user_config)

    if overrides:
        merged = deep_merge(merged, overrides)

    return merged


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> BookdigestConfig:
    """
    Load the complete, validated configuration.

    Args:
        path: User config file (defaults to .bookdigest/config.yaml)
        overrides: Nested mapping applied last, e.g. {"provider": {"model": "x"}}

    Raises:
        ConfigParseError: User config is not valid YAML
        ConfigValidationError: Merged config does not match the schema
    """
    user_path = Path(path) if path else BookdigestPaths.config()
    merged = load_config_dict(user_path, overrides)
    return validate_config(merged, path=user_path if user_path.exists() else None)


# =============================================================================
# Saving
# =============================================================================


def save_user_config(data: dict[str, Any], path: Optional[Path] = None) -> Path:
    """Persist a user config mapping. Returns the written path."""
    user_path = Path(path) if path else BookdigestPaths.config()
    written = dump_yaml(data, user_path)
    logger.info(f"{CONFIG} Saved user config to {written}")
    return written


def parse_value(raw: str) -> Any:
    """
    Interpret a CLI value the way YAML would.

    "0.5" -> 0.5, "3" -> 3, "null" -> None, "true" -> True, anything else
    stays a string.
    """
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def set_config_value(key: str, value: Any, path: Optional[Path] = None) -> Path:
    """
    Set a dotted key (e.g. "provider.model") in the user config.

    The result is validated against the schema before anything is written.

    Raises:
        ConfigValidationError: If the key is unknown or the value is invalid
    """
    parts = [p for p in key.split(".") if p]
    if not parts:
        raise ConfigValidationError("Config key must not be empty")

    user_path = Path(path) if path else BookdigestPaths.config()
    user_config = load_user_config(user_path) or {}

    node = user_config
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value

    validate_config(deep_merge(load_defaults(), user_config), path=user_path)
    return save_user_config(user_config, user_path)


def get_config_source(path: Optional[Path] = None) -> str:
    """
    Describe where config is loaded from.

    Useful for CLI display.
    """
    user_path = Path(path) if path else BookdigestPaths.config()
    if user_path.exists():
        return f"{user_path} (overriding defaults)"
    return f"{DEFAULTS_PATH} (package defaults)"


__all__ = [
    "DEFAULTS_PATH",
    "get_config_source",
    "load_config",
    "load_config_dict",
    "load_defaults",
    "load_user_config",
    "parse_value",
    "save_user_config",
    "set_config_value",
    "validate_config",
]
