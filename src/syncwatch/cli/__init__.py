"""syncwatch CLI interface."""

import typer
from rich.console import Console

from syncwatch.config import CONFIG_FILE, SYNCWATCH_DIR

# CLI App
app = typer.Typer(
    name="syncwatch",
    help="Debounced sync triggers for watched directories.",
    no_args_is_help=True,
)

# Console for rich output
console = Console()

# Default paths
LOGS_DIR = SYNCWATCH_DIR / "logs"

__all__ = ["CONFIG_FILE", "LOGS_DIR", "SYNCWATCH_DIR", "app", "console"]

# Import commands to register them
from syncwatch.cli.commands import init, sync, validate, watch  # noqa: E402, F401


@app.command()
def version() -> None:
    """Show syncwatch version."""
    from syncwatch import __version__

    console.print(f"syncwatch v{__version__}")


if __name__ == "__main__":
    app()
