# bookdigest/cli/commands/config.py
"""
Configuration command.

Usage:
    bookdigest config                              # Show effective config
    bookdigest config --json                       # Output as JSON
    bookdigest config --path                       # Show config file path
    bookdigest config set provider.name deepseek   # Change a value
"""

from __future__ import annotations

import json

import typer

from bookdigest.cli.ui import ui
from bookdigest.config.loader import get_config_source, load_config, parse_value, set_config_value
from bookdigest.core.exceptions import ConfigurationError
from bookdigest.core.paths import BookdigestPaths
from bookdigest.llm.credentials import CredentialError, resolve_api_key
from bookdigest.logging.logger import get_logger

logger = get_logger(__name__)

SECRET_MASK = "********"


def _masked(data: dict) -> dict:
    provider = dict(data.get("provider", {}))
    if provider.get("api_key"):
        provider["api_key"] = SECRET_MASK
    return {**data, "provider": provider}


def command(show_path: bool = False, as_json: bool = False) -> None:
    """
    View the effective configuration (package defaults + user overrides).

    Examples:
        bookdigest config
        bookdigest config --json
        bookdigest config --path
    """
    config_path = BookdigestPaths.config()

    if show_path:
        print(str(config_path))
        return

    try:
        config = load_config()
    except ConfigurationError as e:
        ui.error(f"Failed to load config: {e}")
        raise typer.Exit(1)

    data = _masked(config.model_dump(mode="json"))

    if as_json:
        print(json.dumps(data, indent=2))
        return

    ui.header("bookdigest configuration")
    ui.info(f"Source: {get_config_source()}")

    provider = config.provider
    try:
        resolve_api_key(provider=provider.name, config={"api_key": provider.api_key})
        key_status = "[green]found[/green]"
    except CredentialError:
        key_status = "[red]missing[/red]"

    retry = config.retry
    engine = config.engine
    ui.settings_table(
        [
            ("Provider", provider.name),
            ("Base URL", provider.resolved_base_url()),
            ("Model", provider.resolved_model()),
            ("API key", key_status),
            ("Temperature", str(provider.temperature)),
            ("Max tokens", str(provider.max_tokens)),
            ("Timeout", f"{provider.timeout:g}s"),
            ("Retry", f"{retry.max_attempts} attempts, {retry.initial_delay:g}s initial delay"),
            ("Context mode", engine.context_mode),
            ("Title match threshold", str(engine.similarity_threshold)),
        ]
    )


def set_command(key: str, value: str) -> None:
    """
    Set a configuration value in the user config file.

    Examples:
        bookdigest config set provider.name openrouter
        bookdigest config set retry.max_attempts 5
        bookdigest config set provider.api_key sk-...
    """
    parsed = parse_value(value)
    try:
        path = set_config_value(key, parsed)
    except ConfigurationError as e:
        ui.error(str(e))
        raise typer.Exit(1)

    shown = SECRET_MASK if key.endswith("api_key") else parsed
    ui.success(f"Set {key} = {shown}")
    ui.info(f"Saved to {path}")
