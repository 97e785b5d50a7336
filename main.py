"""CLI entry point for the decision graph engine."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from config.settings import get_settings
from decision_engine import DecisionEngine, DecisionGraphError, LoaderError
from loaders import FilesystemLoader
from models.schemas import EvaluationOptions, EvaluationResult


__version__ = "1.0.0"

console = Console()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _configure_logging(level: str) -> None:
    """Route log records through rich at the requested level."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _parse_context(context_json: str | None, context_file: Path | None) -> Any:
    """Read the evaluation context from an option or a file."""
    if context_file is not None:
        text = context_file.read_text(encoding="utf-8")
        source = str(context_file)
    else:
        text = context_json or "{}"
        source = "--context"

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON in {source}: {e}") from e


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: LOG_LEVEL or WARNING)",
)
def cli(log_level: str | None) -> None:
    """Decision Graph Engine - evaluate decision graphs against JSON input."""
    level = (log_level or get_settings().log_level).upper()
    if level not in LOG_LEVELS:
        raise click.BadParameter(
            f"{level!r} is not one of {', '.join(LOG_LEVELS)}", param_hint="LOG_LEVEL"
        )
    _configure_logging(level)


@cli.command()
@click.argument("key")
@click.option("--context", "context_json", default=None, help="Context as a JSON string")
@click.option(
    "--context-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read the context from a JSON file",
)
@click.option(
    "--decisions-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding decision JSON files",
)
@click.option("--trace/--no-trace", default=None, help="Include the per-node trace")
@click.option("--performance/--no-performance", default=None, help="Include timing data")
@click.option("--timeout-ms", type=click.IntRange(min=1), default=None, help="Evaluation deadline")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result JSON")
def evaluate(
    key: str,
    context_json: str | None,
    context_file: Path | None,
    decisions_dir: Path | None,
    trace: bool | None,
    performance: bool | None,
    timeout_ms: int | None,
    as_json: bool,
) -> None:
    """Evaluate the decision stored under KEY."""
    settings = get_settings()
    context = _parse_context(context_json, context_file)

    options = EvaluationOptions.from_settings(settings)
    overrides: dict[str, Any] = {}
    if trace is not None:
        overrides["include_trace"] = trace
    if performance is not None:
        overrides["include_performance"] = performance
    if timeout_ms is not None:
        overrides["max_execution_time_ms"] = timeout_ms
    options = options.model_copy(update=overrides)

    loader = FilesystemLoader(
        decisions_dir or settings.decisions_dir,
        keep_in_memory=settings.keep_decisions_in_memory,
    )
    engine = DecisionEngine(loader)

    async def run() -> EvaluationResult:
        return await engine.evaluate(key, context, options)

    try:
        result = asyncio.run(run())
    except (DecisionGraphError, LoaderError) as e:
        console.print(f"[red]✗ {type(e).__name__}: {e}[/red]")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    console.print(Panel(f"[bold]Decision:[/bold] {key}", title="Decision Graph"))
    console.print("\n[bold green]Result:[/bold green]")
    console.print_json(json.dumps(result.result))

    if result.trace is not None:
        _print_trace(result)

    if result.performance is not None:
        console.print("\n[bold]Performance:[/bold]")
        for name, value in result.performance.items():
            console.print(f"  {name}: {value}")


@cli.command()
@click.argument("key")
@click.option(
    "--decisions-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding decision JSON files",
)
def show(key: str, decisions_dir: Path | None) -> None:
    """Show the nodes and edges of the decision stored under KEY."""
    loader = FilesystemLoader(decisions_dir or get_settings().decisions_dir)

    try:
        graph = asyncio.run(loader.load(key))
    except LoaderError as e:
        console.print(f"[red]✗ {type(e).__name__}: {e}[/red]")
        sys.exit(1)

    console.print(Panel(graph.description or "", title=graph.name or graph.id))

    nodes = Table(show_header=True, header_style="bold cyan", title="Nodes")
    nodes.add_column("ID", style="dim")
    nodes.add_column("Name")
    nodes.add_column("Type")
    for node in graph.nodes.values():
        nodes.add_row(node.id, node.name, node.type)
    console.print(nodes)

    edges = Table(show_header=True, header_style="bold cyan", title="Edges")
    edges.add_column("ID", style="dim")
    edges.add_column("Source")
    edges.add_column("Target")
    for edge in graph.edges:
        edges.add_row(edge.id, edge.source_id, edge.target_id)
    console.print(edges)


def _print_trace(result: EvaluationResult) -> None:
    """Print the execution trace in a formatted table."""
    table = Table(show_header=True, header_style="bold cyan", title="Execution Trace")
    table.add_column("Node", style="dim")
    table.add_column("Type")
    table.add_column("Time (ms)", justify="right")
    table.add_column("Output", justify="left")

    for entry in result.trace or []:
        table.add_row(
            entry.name or entry.node_id,
            entry.type,
            f"{entry.execution_time_ms:.2f}",
            json.dumps(entry.output),
        )

    console.print(table)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
