# bookdigest/cli/cli.py
"""
bookdigest CLI - Main application.

Commands:
    bookdigest summarize     Summarize a book chapter by chapter (START HERE)
    bookdigest chapters      Show how a book splits into chapters
    bookdigest config        View configuration (config set KEY VALUE to change it)
    bookdigest serve         Start the conversion API server
    bookdigest version       Show the installed version

NOTE: Commands use lazy loading - heavy imports only happen when a command is invoked.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="bookdigest",
    help="bookdigest - progressive chapter summaries. Start with: bookdigest summarize book.epub",
    no_args_is_help=True,
    add_completion=False,
)


# =============================================================================
# LAZY COMMANDS
# =============================================================================
# Each command is a thin wrapper that imports the real implementation only when invoked.


@app.command("summarize")
def summarize(
    path: Path = typer.Argument(..., help="Book to summarize (.epub, .txt, .md)."),
    stop_at: Optional[str] = typer.Option(None, "--stop-at", "-s", help="Stop after this chapter title."),
    choose: bool = typer.Option(False, "--choose", "-c", help="Pick the stop chapter from the TOC."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write markdown to this file."),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="Provider preset to use."),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model name override."),
    context_mode: Optional[str] = typer.Option(None, "--context-mode", help="latest or cumulative."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs."),
) -> None:
    """Summarize a book chapter by chapter."""
    from bookdigest.cli.commands import summarize as mod

    mod.command(path=path, stop_at=stop_at, choose=choose, output=output, provider=provider, model=model, context_mode=context_mode, verbose=verbose)


@app.command("chapters")
def chapters(
    path: Path = typer.Argument(..., help="Book to inspect (.epub, .txt, .md)."),
) -> None:
    """List a book's table of contents and chapters."""
    from bookdigest.cli.commands import chapters as mod

    mod.command(path=path)


config_app = typer.Typer(help="View or change configuration.", invoke_without_command=True)


@config_app.callback()
def config(
    ctx: typer.Context,
    show_path: bool = typer.Option(False, "--path", help="Show config file path."),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """View configuration."""
    if ctx.invoked_subcommand is not None:
        return

    from bookdigest.cli.commands import config as mod

    mod.command(show_path=show_path, as_json=as_json)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Dotted key, e.g. provider.model."),
    value: str = typer.Argument(..., help="New value (YAML scalar)."),
) -> None:
    """Set a value in the user config file."""
    from bookdigest.cli.commands import config as mod

    mod.set_command(key=key, value=value)


app.add_typer(config_app, name="config")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Host to bind to."),
    port: int = typer.Option(8080, "--port", "-p", help="Port to bind to."),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload."),
) -> None:
    """Start the conversion API server."""
    from bookdigest.cli.commands import serve as mod

    mod.command(host=host, port=port, reload=reload)


@app.command("version")
def version() -> None:
    """Show the installed version."""
    from bookdigest import __version__

    print(f"bookdigest {__version__}")


if __name__ == "__main__":
    app()
