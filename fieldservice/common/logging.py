"""Logging setup shared by the maintenance and numbering entry points.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached once, to the ``fieldservice`` logger, by whichever CLI runs.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: int | str = logging.INFO,
    module_name: str = "fieldservice",
) -> logging.Logger:
    """Attach a stdout handler to the package logger.

    Args:
        level: Level as a number or a name ("DEBUG", "info").
        module_name: Logger to configure.

    Returns:
        The configured logger. Calling again only updates its level.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level}")
        level = resolved

    logger = logging.getLogger(module_name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
