"""Console output for the grid driver."""

from .console import console, grid_summary, header, ok

__all__ = [
    "console",
    "ok",
    "header",
    "grid_summary",
]
