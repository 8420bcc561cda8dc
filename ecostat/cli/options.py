import typer
from rich.console import Console

from ecostat import __version__
from ecostat.config import GRID_INTENSITY_ENV
from ecostat.theme import AVAILABLE_THEMES, DEFAULT_THEME


def _version_callback(value: bool | None):
    """Display the CLI version when the eager flag is provided."""
    if value:
        console = Console()
        console.print(f"v{__version__}")
        raise typer.Exit(0)


VERSION_OPTION = typer.Option(
    False,
    "--version",
    "-v",
    is_flag=True,
    is_eager=True,
    callback=_version_callback,
    help="Show ecostat version",
)

EVENTS_ARGUMENT = typer.Argument(
    ...,
    metavar="EVENTS",
    help="JSONL event log, or a directory searched recursively for *.jsonl logs.",
    show_default=False,
)

SESSION_OPTION = typer.Option(
    None,
    "--session",
    "-s",
    help="Session to report on. Defaults to the most recently updated session.",
)

THEME_OPTION = typer.Option(
    DEFAULT_THEME,
    "--theme",
    help=f"Select output colour theme. Available: {', '.join(AVAILABLE_THEMES)}.",
    show_default=True,
    case_sensitive=False,
)

GRID_INTENSITY_OPTION = typer.Option(
    None,
    "--grid-intensity",
    "-g",
    envvar=GRID_INTENSITY_ENV,
    help="Grid carbon intensity in gCO2/kWh. Invalid values fall back to 400.",
)

MARKDOWN_OPTION = typer.Option(
    False,
    "--markdown",
    "-m",
    help="Print the report as markdown",
)

JSON_OPTION = typer.Option(
    False,
    "--json",
    "-j",
    help="Export report as json",
)

CLAMP_OPTION = typer.Option(
    False,
    "--clamp",
    help="Ignore usage snapshots that go backwards instead of subtracting them.",
)
