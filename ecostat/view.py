"""Rendering helpers using Rich for ecostat CLI output."""

from datetime import datetime

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ecostat.grading import impact_bar
from ecostat.models import EcoReport
from ecostat.theme import THEMES, EcoStatTheme


def resolve_theme(name: str) -> EcoStatTheme:
    """Return the colour palette for the requested theme name."""
    key = name.lower()
    try:
        return THEMES[key]
    except KeyError as exc:
        available = ", ".join(sorted(THEMES))
        message = f"unknown theme '{name}'. Available themes: {available}"
        raise ValueError(message) from exc


def _metric_table(title: str, theme: EcoStatTheme, *, value_header: str) -> Table:
    table = Table(
        title=title,
        box=box.SIMPLE_HEAVY,
        show_lines=False,
        header_style=theme.header_style,
        row_styles=theme.row_styles,
        pad_edge=False,
        padding=(0, 1),
    )
    table.add_column("Metric", style=theme.label_style)
    table.add_column(value_header, justify="right", style=theme.value_style)
    return table


def render_report(
    report: EcoReport,
    *,
    console: Console | None = None,
    theme: EcoStatTheme,
) -> None:
    """Render a full eco report as Rich tables."""
    console = console or Console()
    grade = report.grade
    estimate = report.estimate
    grade_style = theme.grade_style(grade.level)

    header = Text("Session Grade:", style=theme.accent_style)
    header.append(f" {grade.grade} ", style=grade_style)
    header.append(f"-- {grade.label}", style=theme.info_style)
    console.print(header)
    impact = Text("Impact:", style=theme.accent_style)
    impact.append(f" {impact_bar(grade.level)}", style=grade_style)
    console.print(impact)

    overview = _metric_table("Session Overview", theme, value_header="Value")
    overview.add_row("Session", report.session_id)
    overview.add_row("Started", format_timestamp(report.started_at))
    overview.add_row("Duration", f"{report.duration_minutes:.1f} min")
    overview.add_row("Messages", str(report.messages))
    overview.add_row("Total tokens", f"{estimate.total_tokens:,}")
    overview.add_row("API cost", f"${report.cost:.6f}")
    console.print(overview)

    footprint = _metric_table("Carbon Footprint", theme, value_header="Value")
    footprint.add_row("Energy consumed", f"{estimate.energy_wh:.4f} Wh")
    footprint.add_row(
        "CO2 emitted", Text(f"{estimate.co2_grams:.4f} g", style=theme.co2_style)
    )
    footprint.add_row("CO2 per message", f"{report.co2_per_message:.4f} g")
    footprint.add_row("Grid intensity", f"{estimate.grid_intensity:g} gCO2/kWh")
    footprint.add_row("Model class", estimate.tier.value)
    console.print(footprint)

    eq = report.equivalents
    equivalents = _metric_table("Real-World Equivalents", theme, value_header="Amount")
    equivalents.add_row("Google searches", f"~{eq.google_searches:.1f}")
    equivalents.add_row("Seconds of video streaming", f"~{eq.video_streaming_seconds:.1f}")
    equivalents.add_row("Smartphone charges", f"~{eq.phone_charges:.3f}")
    equivalents.add_row("Minutes of a 10W LED bulb", f"~{eq.led_bulb_minutes:.1f}")
    equivalents.add_row("km driven (EU avg car)", f"~{eq.km_driven:.5f}")
    console.print(equivalents)

    tokens = report.tokens
    breakdown = _metric_table("Token Breakdown", theme, value_header="Count")
    breakdown.add_row("Input", f"{tokens.input:,}")
    breakdown.add_row("Output", f"{tokens.output:,}")
    breakdown.add_row("Reasoning", f"{tokens.reasoning:,}")
    breakdown.add_row("Cache read", f"{tokens.cache_read:,}")
    breakdown.add_row("Cache write", f"{tokens.cache_write:,}")
    console.print(breakdown)

    models = Text("Models:", style=theme.accent_style)
    models.append(f" {', '.join(report.models) or 'None recorded'}", style=theme.label_style)
    console.print(models)
    providers = Text("Providers:", style=theme.accent_style)
    providers.append(
        f" {', '.join(report.providers) or 'None recorded'}", style=theme.label_style
    )
    console.print(providers)

    tip = Text("Tip:", style=theme.accent_style)
    tip.append(f" {grade.tip}", style=theme.info_style)
    console.print(tip)


def render_session_list(
    reports: list[EcoReport],
    *,
    console: Console | None = None,
    theme: EcoStatTheme,
) -> None:
    """Render one row per session with its footprint and grade."""
    console = console or Console()

    if not reports:
        console.print(Text("No sessions with usage data found.", style=theme.warning_style))
        return

    table = Table(
        title="Sessions",
        box=box.SIMPLE_HEAVY,
        show_lines=False,
        header_style=theme.header_style,
        row_styles=theme.row_styles,
        pad_edge=False,
        padding=(0, 1),
    )
    table.add_column("#", justify="right", style=theme.accent_style)
    table.add_column("Session", overflow="fold", max_width=40, style=theme.label_style)
    table.add_column("Messages", justify="right", style=theme.count_style)
    table.add_column("Tokens", justify="right", style=theme.value_style)
    table.add_column("CO2 (g)", justify="right", style=theme.co2_style)
    table.add_column("Grade", justify="center")
    table.add_column("Started", justify="left", style=theme.label_style)

    for index, report in enumerate(reports, start=1):
        table.add_row(
            str(index),
            report.session_id,
            str(report.messages),
            f"{report.estimate.total_tokens:,}",
            f"{report.estimate.co2_grams:.4f}",
            Text(report.grade.grade, style=theme.grade_style(report.grade.level)),
            format_timestamp(report.started_at),
        )

    console.print(table)


def format_timestamp(value: datetime | None) -> str:
    """Format a timestamp for table display, using local time when possible."""
    if value is None:
        return "—"
    dt = value.replace(microsecond=0)
    if dt.tzinfo is None:
        return dt.isoformat()
    return dt.astimezone().isoformat()
