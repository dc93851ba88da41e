"""Configuración de logging para salud_chart."""

from __future__ import annotations

import logging
import sys

logger = logging.getLogger("salud_chart")


def setup_logger(level: int = logging.WARNING) -> None:
    """Attach a stderr handler to the package logger.

    Calling it again only updates the level of the logger and its handlers.

    Args:
        level: Logging level (default: WARNING).
    """
    logger.setLevel(level)
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("salud_chart: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
