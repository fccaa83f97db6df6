#!/usr/bin/env python3
"""
Logging bootstrap.

The library itself only creates module loggers; applications call
setup_logging once at startup to see them.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from statecell.core.constants import LOG_FORMAT, TRUTHY_VALUES, EnvVar


def setup_logging(level: int | None = None, log_file: Path | None = None) -> int:
    """
    Set up logging for applications using statecell.

    Args:
        level: Log level; defaults to DEBUG if STATECELL_DEBUG is set, else WARNING
        log_file: Optional file to log to in addition to stderr

    Returns:
        The level that was configured

    """
    if level is None:
        debug = os.getenv(EnvVar.DEBUG, "").strip().lower() in TRUTHY_VALUES
        level = logging.DEBUG if debug else logging.WARNING

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)
    return level
