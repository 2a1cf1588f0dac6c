"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="anchor-insight",
    help="Anchor Insight - Structural Metrics for Solana/Anchor Programs",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"anchor-insight {__version__}")
        raise typer.Exit()


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """Measure handler, complexity and code-volume metrics of contract sources."""


# Import subcommands to register them
from .metrics import metrics as _metrics  # noqa: F401, E402


def main() -> None:
    app()
