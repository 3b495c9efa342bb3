"""Logging setup utilities for ledbar.

stdout belongs to the status bar, so log lines go to an append-only file
next to the control socket, optionally mirrored to stderr.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from ledbar.config.settings import LoggingConfig

ROOT_LOGGER = "ledbar"


def setup_logging(config: LoggingConfig | None = None, log_file: Path | str | None = None) -> None:
    """Configure the ``ledbar`` logger.

    Replaces any handlers from an earlier call, so it is safe to call
    again on every supervisor restart.

    Args:
        config: Logging configuration. If None, uses defaults.
        log_file: File to append log lines to.

    Raises:
        OSError: If the log file cannot be opened for appending.
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger(ROOT_LOGGER)
    teardown_logging()
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    formatter = logging.Formatter(config.format, datefmt=config.datefmt)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if config.console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)


def teardown_logging() -> None:
    """Flush and close every handler on the ``ledbar`` logger."""
    root_logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(root_logger.handlers):
        handler.flush()
        handler.close()
        root_logger.removeHandler(handler)
