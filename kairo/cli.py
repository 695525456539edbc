"""Typer-based CLI for Kairo metadata analysis."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from . import __version__
from .analyzer import MetadataAnalyzer
from .config_manager import load_config
from .graph_export import export_dot, export_json
from .models import AnalysisResult
from .weights import categorize, effective_weight

console = Console()

app = typer.Typer(
    help="Kairo: Salesforce metadata analyzer that extracts business processes from technical metadata.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

EXPORT_FORMATS = ("json", "dot")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"Kairo v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    )
):
    """Kairo: dependency graphs for Salesforce metadata."""
    pass


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else load_config()["log_level"]
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _run_analysis(source: Path) -> AnalysisResult:
    analyzer = MetadataAnalyzer(progress_log_interval=load_config()["progress_log_interval"])
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Analyzing metadata...", total=None)

        def on_progress(processed: int, total: int) -> None:
            progress.update(task, completed=processed, total=total)

        try:
            return analyzer.analyze(source, on_progress)
        except OSError as exc:
            raise typer.BadParameter(f"Could not scan '{source}': {exc}")


def _print_summary(result: AnalysisResult) -> None:
    typer.echo(f"Total components: {result.stats.total_components}")
    typer.echo(f"Total dependencies: {result.stats.total_dependencies}")

    table = Table(title="Components by type", show_header=True)
    table.add_column("Type", style="cyan")
    table.add_column("Count", justify="right")
    for component_type, count in sorted(result.stats.components_by_type.items()):
        table.add_row(component_type, str(count))
    console.print(table)


@app.command("analyze")
def analyze_command(
    source: Path = typer.Argument(..., exists=True, file_okay=False, help="Salesforce metadata source directory."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the graph to this file."),
    fmt: str = typer.Option("json", "--format", "-f", help="Export format: json or dot."),
    focus: str = typer.Option("", "--focus", help="Only export components matching this text and their neighbors."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
):
    """Analyze Salesforce metadata and build the dependency graph."""
    if fmt not in EXPORT_FORMATS:
        raise typer.BadParameter(f"Unsupported format '{fmt}'. Choose from: {', '.join(EXPORT_FORMATS)}")
    _configure_logging(verbose)

    result = _run_analysis(source.resolve())
    _print_summary(result)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        if fmt == "dot":
            export_dot(result, output, focus=focus)
        else:
            export_json(result, output, focus=focus)
        typer.echo(f"Graph written to {output}")


@app.command("stats")
def stats_command(
    source: Path = typer.Argument(..., exists=True, file_okay=False, help="Salesforce metadata source directory."),
):
    """Show component counts and the weight-category distribution."""
    _configure_logging(False)
    result = _run_analysis(source.resolve())
    _print_summary(result)

    categories = Counter(categorize(effective_weight(d)) for d in result.graph.dependencies)
    table = Table(title="Dependencies by significance", show_header=True)
    table.add_column("Category", style="cyan")
    table.add_column("Count", justify="right")
    for category in ("Critical Process", "Business Logic", "Code Structure", "Data Operations", "Infrastructure"):
        table.add_row(category, str(categories.get(category, 0)))
    console.print(table)


if __name__ == "__main__":
    app()
