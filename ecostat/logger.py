"""Package logger routed through Rich."""

import logging
import os

from rich.logging import RichHandler

LOG_LEVEL_ENV = "ECOSTAT_LOG_LEVEL"

logger = logging.getLogger("ecostat")


def _resolve_level() -> str:
    level = os.getenv(LOG_LEVEL_ENV) or os.getenv("LOG_LEVEL") or "WARNING"
    return level.upper()


logger.setLevel(_resolve_level())
if not logger.handlers:
    logger.addHandler(
        RichHandler(rich_tracebacks=True, show_path=False, log_time_format="[%X]")
    )
