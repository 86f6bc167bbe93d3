import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_MAX_FOCUSED_LINES = 60
DEFAULT_LOG_LEVEL = "WARNING"


def get_max_focused_lines() -> int:
    raw = os.getenv("CODEX_FOCUS_MAX_LINES")
    if not raw:
        return DEFAULT_MAX_FOCUSED_LINES
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer CODEX_FOCUS_MAX_LINES=%r", raw)
        return DEFAULT_MAX_FOCUSED_LINES
    return clamp_max_lines(value)


def clamp_max_lines(value: int) -> int:
    if value < 1:
        logger.warning("Line budget %d is below 1, using 1", value)
        return 1
    return value


def get_log_level() -> str:
    return os.getenv("CODEX_FOCUS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
