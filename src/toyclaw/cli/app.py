# src/toyclaw/cli/app.py
"""Command-line interface for toyclaw.

A thin Typer wrapper around the commands layer. Each command:
1. Parses args (via Typer)
2. Creates progress callbacks (for Rich display)
3. Calls commands module functions
4. Renders results with Rich
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from toyclaw import __version__
from toyclaw.commands import (
    AssessResult,
    BuildIndexResult,
    ProgressUpdate,
    assess,
    build_index,
    query,
    status,
)
from toyclaw.config import load_env_file
from toyclaw.log import configure_logging

app = typer.Typer(
    name="toyclaw",
    help="toyclaw - Toy safety compliance assessments grounded in regulatory documents.",
    no_args_is_help=True,
)
console = Console()

PREVIEW_CHARS = 160


def version_callback(value: bool) -> None:
    if value:
        console.print(f"toyclaw {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable debug logging.",
    ),
) -> None:
    """toyclaw - Toy safety compliance assessments."""
    load_env_file()
    configure_logging(verbose=verbose)


@app.command(name="build-index")
def build_index_cmd(
    docs_dir: str = typer.Argument(None, help="Documents directory (default: from config)"),
    output_dir: str = typer.Argument(None, help="Index directory (default: from config)"),
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    no_progress: bool = typer.Option(
        False,
        "--no-progress",
        help="Disable progress bars",
    ),
) -> None:
    """Build the compliance index from a tree of regulatory documents."""
    if not no_progress and console.is_terminal:
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.fields[stage]:>12}", justify="right"),
            BarColumn(bar_width=20),
            TextColumn("{task.description}", style="dim"),
            console=console,
        ) as progress:
            task = progress.add_task("", total=None, stage="")

            def on_progress(update: ProgressUpdate) -> None:
                progress.update(
                    task,
                    stage=update.stage.value,
                    description=update.message or "",
                    total=None if update.is_indeterminate else update.total,
                    completed=update.current,
                )

            result = build_index.build_index(
                docs_dir=docs_dir,
                output_dir=output_dir,
                config_path=config_file,
                on_progress=on_progress,
            )
    else:
        result = build_index.build_index(
            docs_dir=docs_dir,
            output_dir=output_dir,
            config_path=config_file,
        )

    _render_build_result(result)


def _render_build_result(result: BuildIndexResult) -> None:
    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    for folder in result.missing_folders:
        console.print(f"[dim]Missing market folder: {folder}[/dim]")
    for document in result.documents:
        if document.skipped:
            console.print(
                f"[yellow]Skipped [{document.market}] {document.filename}: "
                f"{document.reason}[/yellow]"
            )
        else:
            console.print(f"[{document.market}] {document.filename} -> {document.chunks} chunks")

    console.print()
    console.print(
        f"[green]Done! {result.doc_count} documents -> {result.total_chunks} chunks indexed "
        f"(dim={result.embedding_dim})[/green]"
    )
    console.print(f"[dim]Index written to {result.index_dir}[/dim]")


@app.command(name="query")
def query_cmd(
    text: str = typer.Argument(..., help="Query text"),
    market: str = typer.Option(..., "--market", "-m", help="Target market, e.g. EUROPE"),
    top_k: int = typer.Option(None, "--top-k", "-k", help="Number of results"),
    index_dir: str = typer.Option(None, "--index-dir", "-i", help="Index directory"),
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """Retrieve the most similar index chunks for a market."""
    result = query.query(
        text=text,
        market=market,
        top_k=top_k,
        index_dir=index_dir,
        config_path=config_file,
    )

    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[dim]Index loaded in {result.load_seconds * 1000:.0f} ms, "
        f"retrieval took {result.retrieval_seconds * 1000:.0f} ms[/dim]"
    )
    if not result.results:
        console.print("[yellow]No results found.[/yellow]")
        raise typer.Exit(0)

    for i, r in enumerate(result.results, 1):
        console.print(
            f"  [{i}] [cyan]{r.source}[/cyan] [{r.market}] [dim](score: {r.score:.3f})[/dim]"
        )
        preview = r.content[:PREVIEW_CHARS].replace("\n", " ")
        if len(r.content) > PREVIEW_CHARS:
            preview += "..."
        console.print(f"      [dim]{preview}[/dim]")


def _render_assessment(result: AssessResult) -> None:
    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        if result.error_detail is not None:
            console.print_json(data=result.error_detail)
        raise typer.Exit(1)
    console.print_json(data=result.assessment)


@app.command(name="assess")
def assess_cmd(
    request_id: str = typer.Argument(..., help="Product-analysis request id"),
    market: str = typer.Option(..., "--market", "-m", help="Target market, e.g. EUROPE"),
    index_dir: str = typer.Option(None, "--index-dir", "-i", help="Index directory"),
    data_dir: str = typer.Option(None, "--data-dir", "-d", help="Data directory"),
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """Run a compliance assessment and print it as JSON."""
    result = assess.assess(
        request_id=request_id,
        market=market,
        index_dir=index_dir,
        data_dir=data_dir,
        config_path=config_file,
    )
    _render_assessment(result)


@app.command(name="show")
def show_cmd(
    assessment_id: str = typer.Argument(..., help="Assessment id"),
    data_dir: str = typer.Option(None, "--data-dir", "-d", help="Data directory"),
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """Print a stored assessment as JSON."""
    result = assess.show(assessment_id=assessment_id, data_dir=data_dir, config_path=config_file)
    _render_assessment(result)


@app.command(name="status")
def status_cmd(
    index_dir: str = typer.Option(None, "--index-dir", "-i", help="Index directory"),
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """Show the compliance index manifest and per-market chunk counts."""
    result = status.status(index_dir=index_dir, config_path=config_file)

    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold]Index:[/bold] {result.index_dir} ({result.format} format)")
    console.print(f"  Version: {result.version or 'unknown'}")
    if result.created_at:
        console.print(f"  Created: {result.created_at}")
    console.print(f"  Documents: {result.doc_count}")
    console.print(f"  Chunks: {result.chunk_count}")
    console.print(f"  Embedding dim: {result.embedding_dim}")

    if result.chunks_by_market:
        table = Table(title="Chunks by market")
        table.add_column("Market", style="cyan")
        table.add_column("Chunks", justify="right")
        for market, count in result.chunks_by_market.items():
            table.add_row(market, str(count))
        console.print(table)


if __name__ == "__main__":
    app()
