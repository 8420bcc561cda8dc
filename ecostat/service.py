"""Replay recorded host event logs into a session accumulator."""

import json
from collections.abc import Iterator
from pathlib import Path

from ecostat.accumulator import SessionAccumulator
from ecostat.events import HostEvent, parse_event
from ecostat.logger import logger

logger = logger.getChild("service")


def iter_event_files(root: Path) -> Iterator[Path]:
    """Yield JSONL event logs under ``root``, or ``root`` itself when it is a file."""
    if not root.exists():
        message = f"events path not found: {root}"
        raise FileNotFoundError(message)
    if root.is_file():
        yield root
        return
    for path in sorted(root.rglob("*.jsonl")):
        if path.is_file():
            yield path


def _iter_json_entries(path: Path) -> Iterator[tuple[int, dict[str, object]]]:
    with path.open("r", encoding="utf-8") as handle:
        for line_no, line in enumerate(handle, start=1):
            if not line.strip():
                logger.debug(f"json line empty: {str(path)} line={line_no}")
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                logger.warning(f"json decode failed: {str(path)} line={line_no}")
                continue
            if isinstance(entry, dict):
                yield line_no, entry


def iter_events(root: Path) -> Iterator[HostEvent]:
    """Yield the relevant host events recorded under ``root`` in file order."""
    for path in iter_event_files(root):
        for _, raw in _iter_json_entries(path):
            event = parse_event(raw)
            if event is not None:
                yield event


def load_accumulator(
    root: Path,
    *,
    accumulator: SessionAccumulator | None = None,
) -> SessionAccumulator:
    """Replay every event under ``root`` and return the populated accumulator.

    Without an explicit ``accumulator`` a fresh one is created that stamps
    sessions with the recorded event times.
    """
    target = accumulator
    if target is None:
        target = SessionAccumulator(use_event_time=True)
    count = 0
    for event in iter_events(root):
        target.handle_event(event)
        count += 1
    logger.debug(f"replayed {count} events from {root}, {len(target)} sessions")
    return target
