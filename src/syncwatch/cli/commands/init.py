"""Init command for syncwatch CLI."""

import typer

from syncwatch.cli import CONFIG_FILE, LOGS_DIR, SYNCWATCH_DIR, app, console

EXAMPLE_CONFIG = """\
# syncwatch configuration
run_on_startup: true
log_unison_stdout: true
debounce_ms: 10000
max_wait_ms: 60000
restart_delay_ms: 1000
backend: watchdog
sync_command: [unison, "{profile}", -auto, -batch]

profiles:
  home:
    include:
      - ~/Documents
      - ~/Pictures
    exclude:
      - .cache
      - Downloads
"""


@app.command()
def init(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration",
    ),
) -> None:
    """Initialize the syncwatch directory.

    Creates ~/.syncwatch with:
    - config.yaml with an example profile
    - logs/ directory for watcher logs
    """
    if CONFIG_FILE.exists() and not force:
        console.print(f"[yellow]syncwatch already initialized at {SYNCWATCH_DIR}[/]")
        console.print("Use [cyan]--force[/] to reinitialize")
        raise typer.Exit(1)

    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(EXAMPLE_CONFIG)

    console.print(f"[green]✓[/] Initialized syncwatch at {SYNCWATCH_DIR}")
    console.print(f"[green]✓[/] Created config file: {CONFIG_FILE}")
    console.print()
    console.print("Edit the profiles, then run [cyan]syncwatch watch[/]")
