# Copyright (c) Syntropy Systems
"""expose init command."""

from pathlib import Path

import typer
from rich.console import Console

from expose.config import CONFIG_FILENAME, write_default_config

console = Console()


def init(
    path: Path = typer.Argument(
        Path(),
        help="Directory to initialize (default: current directory)",
    ),
) -> None:
    """Initialize an expose project.

    Creates a .expose directory holding config.yaml with the default
    experiment settings.
    """
    expose_dir = path.resolve() / ".expose"
    config_path = expose_dir / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]Already initialized:[/yellow] {expose_dir}")
        return

    write_default_config(config_path)

    console.print(f"[green]Initialized expose project:[/green] {expose_dir}")
    console.print(f"  [dim]config:[/dim] {config_path}")
