"""Host-facing facade: an event sink plus the ``co2_report`` tool."""

from typing import Any

from ecostat.accumulator import SessionAccumulator
from ecostat.events import HostEvent, parse_event
from ecostat.logger import logger
from ecostat.report import NO_DATA_MESSAGE, format_report, has_data

logger = logger.getChild("tracker")

TOOL_NAME = "co2_report"
TOOL_DESCRIPTION = (
    "Shows the estimated CO2 carbon footprint of the current OpenCode session. "
    "Generates an eco report with session grade (A+ to F), carbon footprint "
    "breakdown, real-world equivalents, token usage, and actionable tips to "
    "code greener. Call this tool when the user asks about CO2, carbon "
    "footprint, environmental impact, or energy usage of their session."
)


class EcoTracker:
    """Bind a :class:`SessionAccumulator` to the host's two call shapes."""

    def __init__(self, accumulator: SessionAccumulator | None = None) -> None:
        if accumulator is None:
            accumulator = SessionAccumulator()
        self.accumulator = accumulator
        logger.info("CO2 tracker initialized")

    def on_event(self, event: HostEvent | dict[str, Any] | None) -> None:
        """Consume one host event, raw or already parsed."""
        if isinstance(event, dict):
            event = parse_event(event)
        self.accumulator.handle_event(event)

    def co2_report(self, session_id: str, *, grid_intensity: float | None = None) -> str:
        """Return the eco report for ``session_id`` or the no-data message."""
        stats = self.accumulator.get(session_id)
        if not has_data(stats):
            return NO_DATA_MESSAGE
        return format_report(stats, grid_intensity=grid_intensity)
