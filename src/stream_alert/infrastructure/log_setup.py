from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from .error import LoggingSetupError

_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"
)


def configure_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    rotation: str = "10 MB",
) -> None:
    """Route loguru output to stderr and, if given, a rotated *log_file*."""

    logger.remove()
    try:
        logger.add(sys.stderr, level=level)
    except ValueError as e:
        # fall back to the default level
        logger.add(sys.stderr)
        raise LoggingSetupError(
            message=f"Invalid log level {level!r}: {e}", context={"level": level}
        ) from e
    if log_file is None:
        return
    try:
        logger.add(
            log_file,
            level=level,
            format=_FORMAT,
            rotation=rotation,
            retention=5,
            encoding="utf-8",
        )
    except (OSError, ValueError) as e:
        raise LoggingSetupError(
            message=f"Can't log to {log_file}: {e}",
            context={"level": level, "log_file": str(log_file)},
        ) from e
