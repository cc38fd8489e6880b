"""Logging setup and helpers for bounded log values."""

import json
import logging
import sys
from typing import Any

from accessgate.config import Settings

LOG_FORMAT = "%(asctime)s level=%(levelname)s logger=%(name)s %(message)s"


def safe_preview(value: Any, limit: int = 240) -> str:
    """Single-line, length-bounded rendering of value for log lines."""
    if value is None:
        return ""
    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)
    s = " ".join(s.split())
    if len(s) > limit:
        return s[: limit - 1] + "…"
    return s


def setup_logging(settings: Settings) -> None:
    """Configure the root logger once from settings.

    ``debug`` forces DEBUG so that every decision is logged.
    """
    level_name = "DEBUG" if settings.debug else settings.log_level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # psycopg logs every pool checkout at DEBUG
    if level <= logging.DEBUG:
        logging.getLogger("psycopg.pool").setLevel(logging.INFO)
