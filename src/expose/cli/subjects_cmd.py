# Copyright (c) Syntropy Systems
"""expose subjects command."""

from rich.console import Console
from rich.table import Table

from expose.subjects import BUILTIN_SUBJECTS

console = Console()


def subjects() -> None:
    """List the built-in subjects."""
    table = Table(title="Built-in subjects")
    table.add_column("Name", style="cyan")
    table.add_column("Description")

    for name, (_factory, description) in BUILTIN_SUBJECTS.items():
        table.add_row(name, description)

    console.print(table)
    console.print("\n[dim]Custom subjects: expose run module:attribute[/dim]")
