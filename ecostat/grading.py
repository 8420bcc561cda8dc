"""Letter grades for CO2 emitted per message."""

import math

from ecostat.models import EcoGrade
from ecostat.utils import safe_ratio

ECO_THRESHOLDS: tuple[tuple[float, EcoGrade], ...] = (
    (
        0.1,
        EcoGrade(
            grade="A+",
            label="Exemplary",
            level=1,
            tip="Your session is incredibly efficient. Keep it up!",
        ),
    ),
    (
        0.3,
        EcoGrade(
            grade="A",
            label="Excellent",
            level=2,
            tip="Great efficiency! Small models and focused prompts pay off.",
        ),
    ),
    (
        0.8,
        EcoGrade(
            grade="B",
            label="Good",
            level=3,
            tip="Solid session. Consider using smaller models for simpler tasks.",
        ),
    ),
    (
        1.5,
        EcoGrade(
            grade="B-",
            label="Above Average",
            level=4,
            tip="Not bad! Try batching questions to reduce message overhead.",
        ),
    ),
    (
        3.0,
        EcoGrade(
            grade="C",
            label="Moderate",
            level=6,
            tip="Consider using a smaller model for routine tasks to cut emissions.",
        ),
    ),
    (
        6.0,
        EcoGrade(
            grade="D",
            label="High Impact",
            level=8,
            tip=(
                "This session is carbon-heavy. Smaller models can reduce your "
                "footprint by up to 10x."
            ),
        ),
    ),
    (
        math.inf,
        EcoGrade(
            grade="F",
            label="Very High Impact",
            level=10,
            tip=(
                "Consider breaking work into smaller sessions and using "
                "efficient models."
            ),
        ),
    ),
)

IMPACT_BAR_WIDTH = 10
FILLED_SEGMENT = "█"
EMPTY_SEGMENT = "░"


def grade_session(co2_grams: float, messages: int) -> EcoGrade:
    """Grade a session by its CO2 emitted per message."""
    per_message = safe_ratio(co2_grams, messages)
    for max_per_message, grade in ECO_THRESHOLDS:
        if per_message <= max_per_message:
            return grade
    # Only reachable for NaN input.
    return ECO_THRESHOLDS[-1][1]


def impact_bar(level: int, width: int = IMPACT_BAR_WIDTH) -> str:
    """Render ``level`` as a fixed-width bar, e.g. ``[███░░░░░░░]``."""
    filled = min(max(level, 0), width)
    return "[" + FILLED_SEGMENT * filled + EMPTY_SEGMENT * (width - filled) + "]"
