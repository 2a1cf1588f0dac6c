"""Metrics CLI command -- structural metrics for a file selection."""

import json
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..analysis.models import WorkspaceMetrics
from ..analysis.workspace import WorkspaceAnalyzer
from ..exceptions import AnchorInsightError
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config

# Display labels for workspace metrics, in table order.
_WORKSPACE_ROWS = {
    "files_analyzed": "Files analyzed",
    "files_skipped": "Files skipped",
    "total_functions": "Functions",
    "handler_count": "Contract handlers",
    "handler_density": "Handlers per handler file",
    "total_statements": "Statements (TSC)",
    "avg_complexity": "Avg cyclomatic complexity",
    "max_complexity": "Max cyclomatic complexity",
    "avg_cognitive_complexity": "Avg nesting depth",
    "max_cognitive_complexity": "Max nesting depth",
    "max_constraint_complexity": "Max account constraints",
    "code_volume_factor": "Code volume factor",
    "function_factor": "Function count factor",
}


@app.command()
def metrics(
    root: Path = typer.Argument(..., help="Workspace root directory"),
    files: List[Path] = typer.Argument(..., help="Source files, relative to ROOT"),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    show_functions: bool = typer.Option(
        False,
        "--functions",
        "-f",
        help="Also list every function record",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Parallel workers (default: CPU count, max 8)",
        min=1,
        max=32,
    ),
    max_file_size: Optional[float] = typer.Option(
        None,
        "--max-file-size",
        help="Skip files larger than this many megabytes (default: 1.0)",
        min=0.001,
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Skip files still unfinished after this many seconds",
        min=0.1,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write per-file details to this log file",
        dir_okay=False,
    ),
):
    """
    Compute structural metrics for the given contract sources.

    Files that cannot be read or parsed are skipped with a warning; the
    command fails only if nothing could be analyzed.

    [bold cyan]Examples:[/bold cyan]

      anchor-insight metrics . programs/vault/src/lib.rs

      anchor-insight metrics . programs/vault/src/lib.rs --functions

      anchor-insight metrics ./workspace src/lib.rs src/state.rs --json

      anchor-insight metrics . src/lib.rs --max-file-size 4 --log-file run.log
    """
    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    try:
        settings = resolve_config(
            config=config, workers=workers, max_file_size_mb=max_file_size, timeout=timeout
        )
        result = WorkspaceAnalyzer(root, settings).analyze(files)

        if json_output:
            _print_json(result, show_functions)
        else:
            _print_tables(result, show_functions)

    except typer.Exit:
        raise

    except AnchorInsightError as e:
        logger.error(f"Analysis failed: {e}")
        if json_output:
            print(json.dumps({"error": e.to_dict()}, indent=2))
        else:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        console.print("\n[yellow]Analysis interrupted by user[/yellow]")
        raise typer.Exit(130)


def _print_json(result: WorkspaceMetrics, show_functions: bool) -> None:
    payload = result.to_dict()
    if show_functions:
        payload["files"] = [
            {"path": fm.path, "functions": [asdict(r) for r in fm.records]}
            for fm in result.files
        ]
    print(json.dumps(payload, indent=2))


def _print_tables(result: WorkspaceMetrics, show_functions: bool) -> None:
    values = result.to_dict()

    console.print()
    console.print(
        f"[bold cyan]WORKSPACE METRICS[/bold cyan] -- {result.files_analyzed} files"
    )
    console.print()

    table = Table(show_header=True, show_lines=False, pad_edge=True)
    table.add_column("Metric", min_width=28)
    table.add_column("Value", justify="right")
    for key, label in _WORKSPACE_ROWS.items():
        table.add_row(label, str(values[key]))
    console.print(table)

    if not show_functions:
        return

    functions = Table(show_header=True, show_lines=False, pad_edge=True)
    functions.add_column("File")
    functions.add_column("Function", no_wrap=True)
    functions.add_column("Line", justify="right")
    functions.add_column("Handler", justify="center")
    functions.add_column("CC", justify="right")
    functions.add_column("Depth", justify="right")
    functions.add_column("Stmts", justify="right")
    functions.add_column("Constraints", justify="right")
    for fm in result.files:
        for record in fm.records:
            functions.add_row(
                fm.path,
                record.name,
                str(record.start_line),
                "[green]yes[/green]" if record.is_handler else "[dim]no[/dim]",
                str(record.cyclomatic_complexity),
                str(record.cognitive_complexity),
                str(record.statement_count),
                "-" if record.constraint_complexity is None else str(record.constraint_complexity),
            )
    console.print()
    console.print(functions)
