# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Seqpad — Segment Padding Operators                                  ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Logging configuration for the ``seqpad`` package logger."""
from __future__ import annotations

import logging
import os
import sys

PACKAGE_LOGGER = 'seqpad'
DEFAULT_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_LEVEL_ENV = 'SEQPAD_LOG_LEVEL'


def setup_logging(level: str | int | None = None,
                  fmt: str | None = None) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    *level* defaults to ``$SEQPAD_LOG_LEVEL`` (``WARNING`` when unset).
    Calling it again replaces the handler instead of stacking another.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, 'WARNING')
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, '_seqpad_handler', False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT, DATE_FORMAT))
    handler._seqpad_handler = True
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
