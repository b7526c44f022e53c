"""Rich console output helpers."""

from rich.console import Console
from rich.table import Table

console = Console()


def ok(msg: str):
    """Print success message."""
    console.print(f"  [green]✓[/green] {msg}")


def header(msg: str):
    """Print bold header."""
    console.print(f"\n[bold]{msg}[/bold]")


def grid_summary(title: str, metrics: dict):
    """Print a two-column table of grid metrics."""
    table = Table(title=title, show_header=False, title_justify="left")
    table.add_column("metric", style="dim")
    table.add_column("value", justify="right")
    for name, value in metrics.items():
        text = f"{value:.3f}" if isinstance(value, float) else str(value)
        table.add_row(name.replace("_", " "), text)
    console.print(table)
