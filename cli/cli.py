"""GitPainter developer CLI.

Runs the same compiler and deployment runner as the API, locally:
- server:  start the FastAPI app
- preview: show a grid file as a contribution graph in the terminal
- pattern: generate a grid file from a preset, gradient, text or line graph
- paint:   paint a grid file onto a repository (or --dry-run the plan)
"""

import asyncio
import os
from pathlib import Path

import typer
import uvicorn
from loguru import logger
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table
from rich.text import Text

from app.core.logger import setup_logger
from app.core.settings import settings
from app.deploy.events import DoneEvent, ErrorEvent, GeneratingEvent, ProgressEvent, PushingEvent
from app.deploy.runner import DeploymentRequest, DeploymentRunner
from app.painter.compiler import compile_plan
from app.painter.constants import CONTRIBUTION_LEVELS, DAYS, MAX_YEAR, MIN_YEAR, PRESETS
from app.painter.errors import PainterError
from app.painter.font import render_text_to_grid
from app.painter.grid_io import export_grid_to_json, import_grid_from_json
from app.painter.line_graph import LineGraphPreset, default_line_graph_config, render_line_graph
from app.painter.patterns import calculate_estimated_commits, generate_gradient_grid, generate_preset_grid
from app.painter.types import Grid

console = Console()

app = typer.Typer(
    name="gitpainter",
    help="GitPainter CLI - paint the GitHub contribution graph with backdated commits",
    add_completion=False,
)

DEFAULT_HOST = os.getenv("SERVER_HOST", "127.0.0.1")
CELL = "■"


def _load_grid(grid_file: Path) -> Grid:
    try:
        return import_grid_from_json(grid_file.read_text(encoding="utf-8")).grid
    except (OSError, PainterError) as e:
        console.print(f"[bold red]✗ Cannot load {grid_file}:[/bold red] {e}")
        raise typer.Exit(code=1) from e


def _render_grid(grid: Grid) -> Table:
    table = Table.grid(padding=(0, 0))
    table.add_column(width=4)
    for _ in grid[0]:
        table.add_column()
    for day, row in zip(DAYS, grid, strict=True):
        cells = [Text(CELL, style=CONTRIBUTION_LEVELS[level]) for level in row]
        table.add_row(Text(day, style="dim"), *cells)
    return table


@app.command()
def server(
    host: str = typer.Option(DEFAULT_HOST, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Run the FastAPI server."""
    logger.info(f"Starting FastAPI server on {host}:{port} (reload={reload})")
    uvicorn.run("app.main:app", host=host, port=port, reload=reload)


@app.command()
def preview(grid_file: Path = typer.Argument(..., help="Grid JSON file")) -> None:
    """Show a grid file as a contribution graph."""
    grid = _load_grid(grid_file)
    console.print(_render_grid(grid))
    console.print(f"\n[cyan]Estimated commits:[/cyan] {calculate_estimated_commits(grid)}")


@app.command()
def pattern(
    output: Path = typer.Argument(..., help="Where to write the grid JSON"),
    preset: str | None = typer.Option(None, "--preset", help=f"Preset name ({', '.join(PRESETS)})"),
    gradient: str | None = typer.Option(None, "--gradient", help="Gradient direction, e.g. LEFT_TO_RIGHT"),
    max_level: float = typer.Option(4, "--max-level", help="Gradient maximum level"),
    text: str | None = typer.Option(None, "--text", help="Text to render"),
    line_graph: bool = typer.Option(False, "--line-graph", help="Render the default line graph"),
    seed: int | None = typer.Option(None, "--seed", help="Seed for random presets"),
) -> None:
    """Generate a grid file."""
    line_preset = None
    if preset:
        if preset not in PRESETS:
            console.print(f"[red]Error:[/red] unknown preset '{preset}'. Choose from: {', '.join(PRESETS)}")
            raise typer.Exit(code=1)
        grid = generate_preset_grid(preset, seed=seed)
    elif gradient:
        if gradient not in {"LEFT_TO_RIGHT", "RIGHT_TO_LEFT", "TOP_TO_BOTTOM", "BOTTOM_TO_TOP"}:
            console.print(f"[red]Error:[/red] unknown gradient direction '{gradient}'")
            raise typer.Exit(code=1)
        grid = generate_gradient_grid(gradient, max_level)
    elif text is not None:
        grid = render_text_to_grid(text)
    elif line_graph:
        config = default_line_graph_config()
        grid = render_line_graph(config, seed=seed)
        line_preset = LineGraphPreset(config=config)
    else:
        console.print("[red]Error:[/red] pass one of --preset, --gradient, --text or --line-graph")
        raise typer.Exit(code=1)

    output.write_text(export_grid_to_json(grid, preset=line_preset), encoding="utf-8")
    console.print(_render_grid(grid))
    console.print(f"[green]✓ Wrote {output}[/green] ({calculate_estimated_commits(grid)} commits)")


@app.command()
def paint(
    grid_file: Path = typer.Argument(..., help="Grid JSON file"),
    username: str = typer.Option(..., "--username", "-u", help="Repository owner"),
    repo: str = typer.Option(..., "--repo", "-r", help="Repository name"),
    token: str = typer.Option("", "--token", envvar="GITHUB_TOKEN", help="Access token (or GITHUB_TOKEN)"),
    year: int | None = typer.Option(
        None, "--year", "-y", min=MIN_YEAR, max=MAX_YEAR, help="Target year (defaults to current)"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only show the commit plan"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Paint a grid file onto a repository."""
    setup_logger(level="DEBUG" if debug else settings.log_level, log_file=settings.log_file)
    grid = _load_grid(grid_file)

    plan = compile_plan(grid, year)
    console.print(f"[cyan]Year:[/cyan] {plan.year}  [cyan]First rendered day:[/cyan] {plan.base_date}")
    console.print(f"[cyan]Planned commits:[/cyan] {plan.total}")
    if plan.ops:
        console.print(f"[cyan]Date range:[/cyan] {plan.ops[0].target_date} → {plan.ops[-1].target_date}")

    if dry_run:
        return
    if not token:
        console.print("[red]Error:[/red] --token or GITHUB_TOKEN is required", style="bold red")
        raise typer.Exit(code=1)

    request = DeploymentRequest(grid=grid, token=token, username=username, repo=repo, year=year)
    runner = DeploymentRunner(settings)
    failure: list[str] = []

    with Progress(TextColumn("{task.description}"), BarColumn(), MofNCompleteColumn(), console=console) as progress:
        task_id = progress.add_task("Cloning", total=None)

        async def emit(event: ProgressEvent) -> None:
            if isinstance(event, GeneratingEvent):
                progress.update(task_id, description="Committing", completed=event.current, total=event.total or None)
            elif isinstance(event, PushingEvent):
                progress.update(task_id, description="Pushing", completed=plan.total)
            elif isinstance(event, DoneEvent):
                progress.update(task_id, description="Done", completed=event.commit_count)
            elif isinstance(event, ErrorEvent):
                failure.append(event.error)

        asyncio.run(runner.run(request, emit))

    if failure:
        console.print(f"[bold red]✗ Paint failed:[/bold red] {failure[0]}")
        raise typer.Exit(code=1)
    console.print(f"[bold green]✓ Pushed {plan.total} commits to {request.slug}[/bold green]")


if __name__ == "__main__":
    app()
