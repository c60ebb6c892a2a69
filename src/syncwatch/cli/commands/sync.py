"""One-shot sync command for syncwatch CLI."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from syncwatch.cli import app, console
from syncwatch.cli.utils import load_config_or_exit, setup_logging
from syncwatch.errors import SyncFailure
from syncwatch.scheduler import SyncTrigger


@app.command()
def sync(
    profile: str = typer.Argument(..., help="Profile name"),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: ~/.syncwatch/config.yaml)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging",
    ),
) -> None:
    """Run the sync command once for a profile.

    Exits with the sync command's exit code.

    Examples:
        syncwatch sync home
    """
    config = load_config_or_exit(config_path)

    if profile not in config.profiles:
        console.print(f"[red]Error:[/] Unknown profile: {profile}")
        console.print(f"Configured profiles: {', '.join(config.profiles)}")
        raise typer.Exit(1)

    setup_logging(debug)

    trigger = SyncTrigger(command=config.sync_command, show_output=config.log_unison_stdout)

    try:
        asyncio.run(trigger.run_checked(profile))
    except SyncFailure as e:
        console.print(f"[red]✗[/] [cyan]{profile}[/]: {e.message}")
        # Killed by a signal: report it the way shells do
        exit_code = 128 - e.exit_code if e.exit_code < 0 else e.exit_code
        raise typer.Exit(exit_code)

    console.print(f"[green]✓[/] Synced [cyan]{profile}[/]")
