"""Package-wide logging setup."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger("glshader")

LOG_LEVEL_ENV = "GLSHADER_LOG_LEVEL"


def set_log_level(level: int | str) -> None:
    """Set the glshader log level.

    Args:
        level: A logging level number, or a level name or number as text
               (e.g. ``"debug"``, ``"10"``)

    Raises:
        ValueError: If the level name is unknown
    """
    if isinstance(level, str):
        level = int(level) if level.isnumeric() else level.upper()
    logger.setLevel(level)


def _init_log_level() -> None:
    set_log_level(logging.WARNING)
    level = os.getenv(LOG_LEVEL_ENV, "")
    if level:
        try:
            set_log_level(level)
        except ValueError:
            logger.warning(f"Ignoring invalid {LOG_LEVEL_ENV}: {level}")


_init_log_level()
