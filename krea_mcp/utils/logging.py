from __future__ import annotations

import sys

from loguru import logger


def configure_logging(level: str = "INFO") -> None:
    """Route loguru output to stderr at ``level``.

    The stdio transport owns stdout, so nothing may be written there.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} {level} [{name}] {message}",
        backtrace=False,
        diagnose=False,
    )


__all__ = ["configure_logging"]
