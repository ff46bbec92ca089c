"""Logging utilities for semantic map builds."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping

_LOGGER_NAME = "semmap"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the semmap hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the semmap logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when configured more than once.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[semmap] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


_EVENT_LEVELS: Dict[str, int] = {
    "map:start": logging.INFO,
    "map:file": logging.DEBUG,
    "map:relationships": logging.INFO,
    "map:clusters": logging.INFO,
    "map:complete": logging.INFO,
}


def log_build_event(logger: logging.Logger, name: str, payload: Mapping[str, Any]) -> None:
    """Log a build-lifecycle event at the level its kind calls for.

    Errors carrying a path are per-file and logged as warnings; errors
    without one abort the build and are logged as errors.
    """
    if name == "map:error":
        level = logging.WARNING if payload.get("path") else logging.ERROR
    else:
        level = _EVENT_LEVELS.get(name, logging.DEBUG)
    if not logger.isEnabledFor(level):
        return
    logger.log(level, "%s %s", name, _describe(payload))


def _describe(payload: Mapping[str, Any]) -> str:
    parts: List[str] = []
    for key, value in payload.items():
        if key == "config":
            continue
        if key == "stats" and isinstance(value, Mapping):
            value = (
                f"{value.get('total_elements', 0)} elements,"
                f" {value.get('total_relationships', 0)} relationships"
            )
        parts.append(f"{key}={value}")
    return " ".join(parts)


__all__ = ["configure_logging", "get_logger", "log_build_event"]
