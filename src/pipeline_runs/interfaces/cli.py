"""CLI: Typer app over the run store (init, list, show, inspect, serve)."""

from __future__ import annotations

import datetime
import json
import logging
import sys
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from pipeline_runs.application.queries import inspect_block, list_runs, show_run
from pipeline_runs.config import load_config
from pipeline_runs.domain import BlockExecution, Failure, RunStoreError, Success
from pipeline_runs.infrastructure.workspace import init_workspace, open_run_store, resolve_workspace_root
from pipeline_runs.infrastructure.workspace.execution_codec import encode_branches

app = typer.Typer(help="pipeline-runs: store, list and inspect recorded pipeline runs.")

_WORKSPACE_HELP = "Workspace root holding .runs (default: config, then nearest ancestor with .runs, then cwd)."


@app.callback()
def _main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging to stderr."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def format_start_time(start_time: int) -> str:
    """Human-readable UTC time for an epoch-seconds start time."""
    dt = datetime.datetime.fromtimestamp(start_time, tz=datetime.timezone.utc)
    return dt.strftime("%Y-%m-%d %H:%M:%S UTC")


def _fail(e: Exception) -> None:
    rprint(f"[red]{escape(str(e))}[/red]")
    sys.exit(1)


def _describe(execution: BlockExecution) -> str:
    if isinstance(execution, Success):
        return "[green]ok[/green] " + escape(json.dumps(execution.value, ensure_ascii=False))
    if isinstance(execution, Failure):
        return f"[red]error[/red] {escape(execution.error)}"
    return "[dim]skipped[/dim]"


@app.command()
def init(
    workspace: str = typer.Option(".", "--workspace", "-w", help="Directory to initialise."),
) -> None:
    """Create the .runs directory in the workspace."""
    try:
        runs_dir = init_workspace(workspace)
    except RunStoreError as e:
        _fail(e)
    rprint(f"[green]Initialized[/green] {runs_dir}")


@app.command("list")
def list_command(
    workspace: Optional[str] = typer.Option(None, "--workspace", "-w", help=_WORKSPACE_HELP),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", min=1, help="Maximum number of runs to show (default: config list_limit, else all)."
    ),
) -> None:
    """List stored runs, most recent first."""
    try:
        store = open_run_store(workspace)
        runs = list_runs(store, limit=limit if limit is not None else load_config().list_limit)
    except RunStoreError as e:
        _fail(e)

    if not runs:
        rprint(f"[dim]No runs found in {store.runs_dir}[/dim]")
        return

    table = Table(title=f"Runs ({store.root})", show_header=True, header_style="bold")
    table.add_column("Run ID", style="cyan", no_wrap=True)
    table.add_column("App hash", style="green", overflow="fold")
    table.add_column("Started", style="dim")
    for run_id, config in runs:
        table.add_row(run_id, config.app_hash, format_start_time(config.start_time))
    Console().print(table)


@app.command()
def show(
    run_id: str = typer.Argument(..., help="Run ID to show."),
    workspace: Optional[str] = typer.Option(None, "--workspace", "-w", help=_WORKSPACE_HELP),
) -> None:
    """Show a run's config and the blocks it executed."""
    try:
        run = show_run(open_run_store(workspace), run_id)
    except RunStoreError as e:
        _fail(e)

    config = run.config
    rprint(
        Panel.fit(
            f"[bold]Run:[/bold] {run.run_id}\n"
            f"[bold]App hash:[/bold] {escape(config.app_hash)}\n"
            f"[bold]Started:[/bold] {format_start_time(config.start_time)}\n"
            f"[bold]Blocks executed:[/bold] {len(run.traces)}"
        )
    )
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Type", style="magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Inputs", justify="right")
    table.add_column("Configured")
    for trace in run.traces:
        configured = "yes" if config.config_for_block(trace.name) is not None else "no"
        table.add_row(str(trace.index), trace.block_type.value, trace.name, str(len(trace.inputs)), configured)
    Console().print(table)


@app.command()
def inspect(
    run_id: str = typer.Argument(..., help="Run ID to inspect."),
    block_name: str = typer.Argument(..., help="Name of the block whose executions to print."),
    workspace: Optional[str] = typer.Option(None, "--workspace", "-w", help=_WORKSPACE_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print the raw per-input JSON arrays."),
) -> None:
    """Print the per-input execution results of one block in a run."""
    try:
        trace = inspect_block(open_run_store(workspace), run_id, block_name)
    except RunStoreError as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps([encode_branches(b) for b in trace.inputs], indent=2, ensure_ascii=False))
        return

    rprint(
        f"[bold]Run:[/bold] {escape(run_id)}  [bold]Block:[/bold] {trace.index}-{trace.block_type.value} {escape(trace.name)}  "
        f"[dim]({len(trace.inputs)} inputs)[/dim]"
    )
    for input_idx, branches in enumerate(trace.inputs):
        rprint(f"[bold]input {input_idx}[/bold]")
        for branch_idx, execution in enumerate(branches):
            rprint(f"  {escape(f'[{branch_idx}]')} {_describe(execution)}")


@app.command()
def serve(
    host: str = "127.0.0.1",
    port: int = 8788,
    workspace: Optional[str] = typer.Option(None, "--workspace", "-w", help=_WORKSPACE_HELP),
) -> None:
    """Serve the read-only HTTP API (FastAPI + uvicorn)."""
    import os

    import uvicorn

    try:
        root = resolve_workspace_root(workspace)
    except RunStoreError as e:
        _fail(e)
    os.environ["PIPELINE_RUNS_WORKSPACE"] = str(root)
    uvicorn.run("pipeline_runs.interfaces.http_api:app", host=host, port=port, reload=False)
