# Copyright (c) Syntropy Systems
"""expose run command."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from expose.config import load_config
from expose.experiment import ExperimentRunner
from expose.models.experiment import TerminationCode
from expose.sinks import CsvResultSink, JsonlResultSink
from expose.subjects import resolve_subject

if TYPE_CHECKING:
    from expose.models.experiment import ExperimentConfig, ExperimentSummary
    from expose.sinks import ResultSink

console = Console()

_TERMINATION_STYLES = {
    TerminationCode.CONVERGENT: "green",
    TerminationCode.TIMED_OUT: "yellow",
    TerminationCode.OUT_OF_RESOURCES: "red",
    TerminationCode.UNSET: "dim",
}


def configure_logging(verbose: bool) -> None:  # noqa: FBT001
    """Route log records through rich, INFO when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def open_sink(
    output: Path,
    config: ExperimentConfig,
    *,
    overwrite: bool,
) -> ResultSink:
    """Open a JSONL or CSV sink depending on the output suffix."""
    suffix = output.suffix.lower()
    if suffix == ".jsonl":
        return JsonlResultSink(output, overwrite=overwrite)
    if suffix == ".csv":
        return CsvResultSink(
            output,
            extra=config.model_dump(exclude={"verbose"}),
            overwrite=overwrite,
        )
    msg = f"Output must be .jsonl or .csv, got '{output.name}'"
    raise ValueError(msg)


def print_summary(summary: ExperimentSummary, label: str) -> None:
    """Print the outcome of an experiment."""
    style = _TERMINATION_STYLES[summary.termination]

    table = Table(title="Doubling experiment", show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Termination", f"[{style}]{summary.termination_name}[/{style}]")
    run_time = "-" if summary.run_time is None else f"{summary.run_time:.3f}s"
    table.add_row("Run time", run_time)
    table.add_row("Levels", str(summary.levels))
    table.add_row("Measurements", str(summary.measurements))
    table.add_row("Min runs", str(summary.min_runs))
    table.add_row("Tuning doublings", str(summary.tuning_doublings))
    ratio = "-" if summary.latest_ratio is None else f"{summary.latest_ratio:.3f}"
    table.add_row("Latest ratio", ratio)

    console.print(table)
    console.print(f"\n[bold]Growth:[/bold] {label}")


def run(  # noqa: PLR0913
    subject: str = typer.Argument(
        ...,
        help="Built-in subject name or module:attribute",
    ),
    tolerance: float | None = typer.Option(
        None, "--tolerance", "-t", help="Maximum ratio drift counted as converged"
    ),
    min_runs: int | None = typer.Option(
        None, "--min-runs", help="Minimum runs before checking convergence"
    ),
    trials: int | None = typer.Option(
        None, "--trials", "-n", help="Measurements per size level"
    ),
    tuning: bool | None = typer.Option(
        None, "--tuning/--no-tuning", help="Search for a starting size first"
    ),
    tuning_tries: int | None = typer.Option(
        None, "--tuning-tries", help="Maximum doublings while tuning"
    ),
    look_back: int | None = typer.Option(
        None, "--look-back", "-l", help="Ratios considered for convergence"
    ),
    give_up: float | None = typer.Option(
        None, "--give-up", help="Hours a single doubling may take"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Narrate the experiment as it runs"
    ),
    config_file: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a config.yaml"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Save measurements (.jsonl or .csv)"
    ),
    overwrite: bool = typer.Option(
        False, "--overwrite", help="Overwrite the output instead of appending"
    ),
) -> None:
    """Run a doubling experiment and report the growth class.

    Examples:
        expose run sort
        expose run pairs --trials 3 --no-tuning -o pairs.jsonl
        expose run mypkg.bench:make_subject --give-up 0.5

    """
    try:
        config = load_config(config_file).with_overrides(
            tolerance=tolerance,
            min_runs=min_runs,
            trials=trials,
            tuning=tuning,
            tuning_tries=tuning_tries,
            look_back=look_back,
            give_up_hours=give_up,
            verbose=verbose or None,
        )
    except (OSError, ValueError) as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        raise typer.Exit(1) from e

    configure_logging(config.verbose)

    try:
        target = resolve_subject(subject)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    sink: ResultSink | None = None
    if output is not None:
        try:
            sink = open_sink(output, config, overwrite=overwrite)
        except (OSError, ValueError) as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from e

    runner = ExperimentRunner(target, config, sink=sink)
    try:
        _ = runner.run()
    finally:
        if sink is not None:
            sink.close()

    print_summary(runner.summary(), runner.classify())
    if output is not None:
        console.print(f"  [dim]measurements:[/dim] {output}")
