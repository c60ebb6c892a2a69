"""syncwatch: debounced, non-overlapping sync triggers for watched directories."""

__version__ = "0.1.0"
