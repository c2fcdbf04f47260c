# Copyright (c) Syntropy Systems
"""expose show command - inspect saved measurements."""
from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from expose.classifier import classify
from expose.results import InsufficientDataError
from expose.sinks import load_runs

console = Console()


def show(
    path: Path = typer.Argument(
        ...,
        help="Measurements file written with --output (.jsonl)",
        exists=True,
    ),
    look_back: int = typer.Option(
        1, "--look-back", "-l", help="Recent ratios averaged for the growth class"
    ),
    run: int = typer.Option(
        -1, "--run", "-r", help="Run to show when several were appended (0 = first)"
    ),
) -> None:
    """Show per-level means, ratios and the growth class of saved measurements.

    Examples:
        expose show pairs.jsonl
        expose show pairs.jsonl --run 0 --look-back 3

    """
    try:
        stores = load_runs(path)
    except ValueError as e:
        console.print(f"[red]Error reading measurements:[/red] {e}")
        raise typer.Exit(1) from e

    if not stores:
        console.print(f"[yellow]No measurements in {path}[/yellow]")
        raise typer.Exit(1)

    if not -len(stores) <= run < len(stores):
        console.print(
            f"[red]Error:[/red] no run {run} in {path} ({len(stores)} runs)"
        )
        raise typer.Exit(1)

    store = stores[run]
    title = str(path)
    if len(stores) > 1:
        title = f"{path} (run {run % len(stores)} of {len(stores)} runs)"

    means = store.level_means()
    table = Table(title=title)
    table.add_column("Level", style="dim")
    table.add_column("Mean (ns)", justify="right")
    table.add_column("Ratio", justify="right")

    for level, mean in enumerate(means):
        # Ratio against the previous level
        ratio = "-" if level == 0 else f"{store.ratio(len(means) - 1 - level):.3f}"
        table.add_row(str(level), f"{mean:,.0f}", ratio)

    console.print(table)

    try:
        growth = classify(store, look_back)
    except InsufficientDataError:
        console.print("\n[bold]Growth:[/bold] Unknown")
        return
    console.print(f"\n[bold]Growth:[/bold] {growth}")
