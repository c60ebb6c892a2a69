"""CLI commands for syncwatch."""

# Import command modules to register them with the app
# These imports have side effects (register commands via @app.command())
from syncwatch.cli.commands import init, sync, validate, watch

__all__ = ["init", "sync", "validate", "watch"]
