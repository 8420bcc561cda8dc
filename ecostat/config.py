"""Runtime configuration read from the environment."""

import math
import os
from collections.abc import Mapping

from ecostat.logger import logger

logger = logger.getChild("config")

GRID_INTENSITY_ENV = "OPENCODE_CO2_GRID_INTENSITY"
# Global average grid carbon intensity, gCO2 per kWh.
DEFAULT_GRID_INTENSITY = 400.0


def parse_grid_intensity(value: str | None) -> float:
    """Parse a grid intensity override, falling back to the default.

    Only positive finite decimals are accepted. Anything else (unset, empty,
    non-numeric, zero, negative, ``inf``, ``nan``) yields
    :data:`DEFAULT_GRID_INTENSITY`.
    """
    if value is None or not value.strip():
        return DEFAULT_GRID_INTENSITY
    try:
        parsed = float(value)
    except ValueError:
        logger.debug(f"ignoring non-numeric grid intensity: {value!r}")
        return DEFAULT_GRID_INTENSITY
    if not math.isfinite(parsed) or parsed <= 0:
        logger.debug(f"ignoring out-of-range grid intensity: {value!r}")
        return DEFAULT_GRID_INTENSITY
    return parsed


def get_grid_intensity(environ: Mapping[str, str] | None = None) -> float:
    """Return the grid carbon intensity configured for this process."""
    env = os.environ if environ is None else environ
    return parse_grid_intensity(env.get(GRID_INTENSITY_ENV))
