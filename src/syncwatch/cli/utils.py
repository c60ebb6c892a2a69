"""Utility functions for syncwatch CLI."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from syncwatch.cli import console
from syncwatch.config import SyncConfig, load_config
from syncwatch.errors import ConfigError

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def load_config_or_exit(path: Path | None) -> SyncConfig:
    """Load the configuration, printing errors and exiting on failure.

    Args:
        path: Config file path, or None for the default location.

    Returns:
        The validated configuration.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    try:
        return load_config(path)
    except ConfigError as e:
        console.print(f"[red]✗[/] {e.message}")
        for error in e.errors:
            loc = " → ".join(str(loc_part) for loc_part in error["loc"])
            console.print(f"  [red]•[/] [yellow]{loc}[/]: {error['msg']}")
        raise typer.Exit(1)


def setup_logging(debug: bool = False, log_file: Path | None = None) -> None:
    """Set up logging for the watcher.

    Args:
        debug: Enable debug logging.
        log_file: Write logs to this file instead of stderr.
    """
    handlers: list[logging.Handler]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(log_file)]
    else:
        handlers = [logging.StreamHandler()]

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
    )
