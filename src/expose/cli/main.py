# Copyright (c) Syntropy Systems
"""Main CLI entry point for expose."""

import typer

from expose.cli.init_cmd import init
from expose.cli.run_cmd import run
from expose.cli.show import show
from expose.cli.subjects_cmd import subjects

app = typer.Typer(
    name="expose",
    help=(
        "Empirical growth-rate estimation. Double the input, time it, "
        "stop when the ratios settle."
    ),
    no_args_is_help=True,
    add_completion=False,
)

# Register commands
_ = app.command()(init)
_ = app.command()(run)
_ = app.command()(subjects)
_ = app.command()(show)


if __name__ == "__main__":
    app()
