"""leasebeat CLI."""

import typer

from leasebeat.cli._console import console
from leasebeat.cli.sweep import sweep
from leasebeat.cli.workers import dead, status

app = typer.Typer(
    name="leasebeat",
    help="Lease-based liveness for Redis worker pools.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        from leasebeat import __version__

        console.print(f"[bold]leasebeat[/bold] [dim]{__version__}[/dim]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version",
    ),
) -> None:
    """Worker heartbeats, liveness checks and registry sweeps."""


# Register commands
app.command()(sweep)
app.command()(dead)
app.command()(status)
