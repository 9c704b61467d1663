"""
Rendering functions for reposcan output.

Core functions return records; this module makes them human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import Iterable, Optional

from .domain import RepositoryRecord

console = Console()


def render_records_table(records: Iterable[RepositoryRecord],
                         title: Optional[str] = "Repositories",
                         target: Optional[Console] = None) -> None:
    """
    Render discovered repositories as a pretty table.

    Args:
        records: Records to display
        title: Optional table title
        target: Console to print to (module console if None)
    """
    out = target or console
    records = list(records)
    if not records:
        out.print("[yellow]No repositories found.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("Repository", style="cyan")
    table.add_column("Slug", style="green")
    table.add_column("Path", style="dim")

    for record in records:
        table.add_row(record.name, record.slug or "-", record.path)

    out.print(table)
