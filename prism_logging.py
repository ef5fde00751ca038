# -*- coding: utf-8 -*-
"""
Prism: Weaving the mathematics of color representation
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Logging Helper
==============
Every module obtains its own logger with ``logging.getLogger(__name__)`` and
never configures handlers itself.  Applications that do not set up logging
can call ``setup_default_logging`` once at start-up.
"""

import logging
from typing import Union

__all__ = ["setup_default_logging", "LOG_FORMAT"]

LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_default_logging(level: Union[int, str] = "INFO") -> None:
    """
    Applies a minimal logging configuration, at most once.

    Does nothing when the root logger already has handlers, so an
    application's own configuration always wins.

    Args:
        level: Level name ("DEBUG", "info", ...) or numeric level.  Unknown
            names fall back to INFO.
    """
    if isinstance(level, str):
        lvl = getattr(logging, level.upper(), logging.INFO)
    else:
        lvl = int(level)

    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(level=lvl, format=LOG_FORMAT)
