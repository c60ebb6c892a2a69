"""Validate command for syncwatch CLI."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from syncwatch.cli import app, console
from syncwatch.cli.utils import load_config_or_exit


@app.command()
def validate(
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: ~/.syncwatch/config.yaml)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show timing and command settings",
    ),
) -> None:
    """Validate the syncwatch configuration.

    Checks that the config:
    - Has valid YAML syntax
    - Defines at least one profile with include directories
    - Uses only known settings with valid values
    """
    config = load_config_or_exit(config_path)

    console.print(f"[green]✓[/] Configuration is valid ({len(config.profiles)} profile(s))")

    table = Table(title="Profiles")
    table.add_column("Profile", style="cyan")
    table.add_column("Include")
    table.add_column("Exclude", style="dim")

    for name, profile in config.profiles.items():
        table.add_row(name, "\n".join(profile.include), "\n".join(profile.exclude) or "-")

    console.print(table)

    if verbose:
        console.print()
        console.print(f"  [dim]Debounce:[/] {config.debounce_ms} ms")
        console.print(f"  [dim]Max wait:[/] {config.max_wait_ms} ms")
        console.print(f"  [dim]Run on startup:[/] {config.run_on_startup}")
        console.print(f"  [dim]Backend:[/] {config.backend}")
        console.print(f"  [dim]Sync command:[/] {' '.join(config.sync_command)}")
