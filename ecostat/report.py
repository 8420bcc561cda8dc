"""Build and render eco reports for accumulated sessions."""

from datetime import UTC, datetime
from typing import TypeGuard

from ecostat.classifier import dominant_tier
from ecostat.config import GRID_INTENSITY_ENV, get_grid_intensity
from ecostat.estimator import compute_equivalents, estimate_carbon
from ecostat.grading import grade_session, impact_bar
from ecostat.models import EcoReport, SessionStats, TokenBreakdown
from ecostat.utils import safe_ratio

NO_DATA_MESSAGE = (
    "No usage data recorded yet for this session. "
    "Start a conversation and check back -- your eco report will be waiting!"
)

METHODOLOGY_NOTE = (
    "Estimates based on Luccioni et al. (2023). Actual values vary by hardware, "
    "data center, and region. "
    f"Configure grid intensity with `{GRID_INTENSITY_ENV}` env var."
)


def has_data(stats: SessionStats | None) -> TypeGuard[SessionStats]:
    """Return True when ``stats`` holds at least one assistant message."""
    return stats is not None and stats.messages > 0


def build_report(
    stats: SessionStats,
    *,
    grid_intensity: float | None = None,
    now: datetime | None = None,
) -> EcoReport:
    """Compute the estimate, grade and equivalents for a session."""
    intensity = get_grid_intensity() if grid_intensity is None else grid_intensity
    current = now or datetime.now(UTC)

    estimate = estimate_carbon(
        stats.total_tokens, dominant_tier(stats.models), intensity
    )
    elapsed = (current - stats.first_seen).total_seconds()

    return EcoReport(
        session_id=stats.session_id,
        grade=grade_session(estimate.co2_grams, stats.messages),
        estimate=estimate,
        equivalents=compute_equivalents(estimate.co2_grams),
        tokens=TokenBreakdown(
            input=stats.input_tokens,
            output=stats.output_tokens,
            reasoning=stats.reasoning_tokens,
            cache_read=stats.cache_read_tokens,
            cache_write=stats.cache_write_tokens,
        ),
        messages=stats.messages,
        cost=stats.cost,
        co2_per_message=safe_ratio(estimate.co2_grams, stats.messages),
        duration_minutes=max(elapsed, 0.0) / 60,
        started_at=stats.first_seen,
        models=sorted(stats.models),
        providers=sorted(stats.providers),
    )


def _bullets(items: list[str], *, bold: bool = False) -> str:
    if not items:
        return "- None recorded"
    if bold:
        return "\n".join(f"- **{item}**" for item in items)
    return "\n".join(f"- {item}" for item in items)


def render_markdown(report: EcoReport) -> str:
    """Render ``report`` as the markdown text returned to chat hosts."""
    grade = report.grade
    estimate = report.estimate
    eq = report.equivalents
    tokens = report.tokens

    lines = [
        "## Eco Report | Your Coding Carbon Footprint",
        "",
        f"> **Session Grade: {grade.grade}** -- {grade.label}",
        f"> Impact: `{impact_bar(grade.level)}`",
        "",
        "---",
        "",
        "### Session Overview",
        "",
        "| Metric | Value |",
        "|---|---|",
        f"| Duration | {report.duration_minutes:.1f} min |",
        f"| Messages | {report.messages} |",
        f"| Total tokens | {estimate.total_tokens:,} |",
        f"| API cost | ${report.cost:.6f} |",
        "",
        "### Carbon Footprint",
        "",
        "| Metric | Value |",
        "|---|---|",
        f"| Energy consumed | {estimate.energy_wh:.4f} Wh |",
        f"| **CO2 emitted** | **{estimate.co2_grams:.4f} g** |",
        f"| CO2 per message | {report.co2_per_message:.4f} g |",
        f"| Grid intensity | {estimate.grid_intensity:g} gCO2/kWh |",
        f"| Model class | {estimate.tier.value} |",
        "",
        "### Real-World Equivalents",
        "",
        "Your session's footprint is roughly equal to:",
        "",
        "| Equivalent | Amount |",
        "|---|---|",
        f"| Google searches | ~{eq.google_searches:.1f} |",
        f"| Seconds of video streaming | ~{eq.video_streaming_seconds:.1f} |",
        f"| Smartphone charges | ~{eq.phone_charges:.3f} |",
        f"| Minutes of a 10W LED bulb | ~{eq.led_bulb_minutes:.1f} |",
        f"| km driven (EU avg car) | ~{eq.km_driven:.5f} |",
        "",
        "### Token Breakdown",
        "",
        "| Type | Count |",
        "|---|---|",
        f"| Input | {tokens.input:,} |",
        f"| Output | {tokens.output:,} |",
        f"| Reasoning | {tokens.reasoning:,} |",
        f"| Cache read | {tokens.cache_read:,} |",
        f"| Cache write | {tokens.cache_write:,} |",
        "",
        "### Models Used",
        "",
        _bullets(report.models, bold=True),
        "",
        "### Providers",
        "",
        _bullets(report.providers),
        "",
        "---",
        "",
        f"> **Tip:** {grade.tip}",
        "",
        f"*{METHODOLOGY_NOTE}*",
    ]
    return "\n".join(lines)


def format_report(
    stats: SessionStats,
    *,
    grid_intensity: float | None = None,
    now: datetime | None = None,
) -> str:
    """Return the markdown eco report for ``stats``."""
    return render_markdown(build_report(stats, grid_intensity=grid_intensity, now=now))
