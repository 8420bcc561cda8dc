from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from ecostat.accumulator import SessionAccumulator
from ecostat.classifier import classify_model
from ecostat.cli.options import (
    CLAMP_OPTION,
    EVENTS_ARGUMENT,
    GRID_INTENSITY_OPTION,
    JSON_OPTION,
    MARKDOWN_OPTION,
    SESSION_OPTION,
    THEME_OPTION,
    VERSION_OPTION,
)
from ecostat.config import parse_grid_intensity
from ecostat.logger import logger
from ecostat.report import NO_DATA_MESSAGE, build_report, has_data, render_markdown
from ecostat.service import load_accumulator
from ecostat.theme import EcoStatTheme
from ecostat.utils import normalize_path
from ecostat.view import render_report, render_session_list, resolve_theme

logger = logger.getChild("cli")

console = Console()

app = typer.Typer(
    help="Estimate the carbon footprint of AI coding sessions.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main(
    *,
    version: bool = VERSION_OPTION,
) -> None:
    """Handle global flags before dispatching to a subcommand."""


def _load(events: Path, *, clamp: bool) -> SessionAccumulator:
    root = normalize_path(events) or events
    try:
        return load_accumulator(
            root,
            accumulator=SessionAccumulator(
                clamp_negative_deltas=clamp, use_event_time=True
            ),
        )
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc


def _theme(name: str) -> EcoStatTheme:
    try:
        return resolve_theme(name)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc


@app.command("report", help="Show the eco report of one session")
def report(
    events: Path = EVENTS_ARGUMENT,
    *,
    session: str | None = SESSION_OPTION,
    theme: str = THEME_OPTION,
    grid_intensity: str | None = GRID_INTENSITY_OPTION,
    markdown: bool = MARKDOWN_OPTION,
    json: bool = JSON_OPTION,
    clamp: bool = CLAMP_OPTION,
) -> None:
    logger.debug(f"report: events={events}")
    logger.debug(f"  --session={session}")
    logger.debug(f"  --grid-intensity={grid_intensity}")
    accumulator = _load(events, clamp=clamp)

    if session is None:
        tracked = accumulator.sessions()
        stats = tracked[0] if tracked else None
    else:
        stats = accumulator.get(session)

    if not has_data(stats):
        console.print(NO_DATA_MESSAGE, soft_wrap=True)
        return

    eco_report = build_report(
        stats,
        grid_intensity=parse_grid_intensity(grid_intensity),
        now=stats.last_updated,
    )
    if json:
        print(eco_report.model_dump_json(indent=2))
    elif markdown:
        print(render_markdown(eco_report))
    else:
        render_report(eco_report, console=console, theme=_theme(theme))


@app.command("ls", help="List sessions with their footprint and grade")
def list_sessions(
    events: Path = EVENTS_ARGUMENT,
    *,
    theme: str = THEME_OPTION,
    grid_intensity: str | None = GRID_INTENSITY_OPTION,
    clamp: bool = CLAMP_OPTION,
) -> None:
    accumulator = _load(events, clamp=clamp)
    intensity = parse_grid_intensity(grid_intensity)
    reports = [
        build_report(stats, grid_intensity=intensity, now=stats.last_updated)
        for stats in accumulator.sessions()
        if has_data(stats)
    ]
    render_session_list(reports, console=console, theme=_theme(theme))


@app.command("classify", help="Show the energy tier of model identifiers")
def classify(
    models: Annotated[list[str], typer.Argument(help="Model identifiers.")],
) -> None:
    for model_id in models:
        console.print(f"{model_id}\t{classify_model(model_id).value}")


def run():
    app()
