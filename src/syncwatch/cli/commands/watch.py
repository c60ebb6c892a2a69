"""Watch command for syncwatch CLI.

Runs the watcher in the foreground until interrupted.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from syncwatch.cli import app, console
from syncwatch.cli.utils import load_config_or_exit, setup_logging
from syncwatch.scheduler import SyncService


@app.command()
def watch(
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: ~/.syncwatch/config.yaml)",
    ),
    profiles: list[str] | None = typer.Option(
        None,
        "--profile",
        "-p",
        help="Only watch this profile (can be used multiple times)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging",
    ),
    log_file: Path | None = typer.Option(
        None,
        "--log-file",
        help="Write logs to a file instead of stderr",
    ),
) -> None:
    """Watch configured directories and sync on change.

    Changes are debounced per profile; a sync never overlaps another sync
    of the same profile.

    Examples:
        syncwatch watch
        syncwatch watch --profile home --debug
        syncwatch watch --config ./syncwatch.yaml --log-file ~/.syncwatch/logs/watch.log
    """
    # Fail fast: nothing starts unless the whole config is valid
    config = load_config_or_exit(config_path)

    try:
        service = SyncService(config, profiles=profiles or None)
    except KeyError as e:
        console.print(f"[red]Error:[/] {e.args[0]}")
        raise typer.Exit(1)

    setup_logging(debug, log_file)

    console.print(f"[cyan]Watching {len(service.schedulers)} profile(s)...[/]")
    console.print("[dim]Press Ctrl+C to stop[/]")

    try:
        asyncio.run(service.run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Watcher stopped.[/]")
