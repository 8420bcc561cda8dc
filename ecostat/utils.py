"""Small helpers shared across ecostat modules."""

from pathlib import Path


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator``, or ``0.0`` when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def normalize_path(path: str | Path | None) -> Path | None:
    """Return an expanded, resolved path, tolerating unresolvable input."""
    if path is None:
        return None
    try:
        candidate = Path(path).expanduser()
    except (TypeError, ValueError, RuntimeError):
        return None
    try:
        return candidate.resolve()
    except OSError:
        return candidate
