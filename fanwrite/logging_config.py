"""Logging setup for the service."""

from __future__ import annotations

import json
import sys
from typing import Any

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def json_line(record: dict[str, Any]) -> str:
    data = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["module"],
        "function": record["function"],
        "line": record["line"],
    }
    if record["exception"] is not None:
        data["exception"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else None,
            "value": str(record["exception"].value) if record["exception"].value else None,
        }
    data.update(record["extra"])
    return json.dumps(data, ensure_ascii=False, default=str)


def _json_format(record: dict[str, Any]) -> str:
    # loguru treats the returned string as a template, so stash the line in extra
    record["extra"]["_json"] = json_line(record)
    return "{extra[_json]}\n"


def setup_logging(*, level: str = "INFO", json_format: bool = False) -> None:
    """Replace loguru's default sink with one console sink.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Emit one JSON object per line instead of colored text.
    """
    logger.remove()
    if json_format:
        logger.add(sys.stderr, format=_json_format, level=level, colorize=False)
    else:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)
