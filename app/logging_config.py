"""Logging setup shared by the ASGI app and the CLI entry point."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
APP_LOGGER = "app"
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(debug: bool = False, verbose: bool = False) -> None:
    """
    Configure the root logger.

    Quiet by default: only this app's loggers at INFO, everything else at
    WARNING. ``debug`` lifts every logger to INFO, ``verbose`` to DEBUG.
    """
    if verbose:
        root_level = logging.DEBUG
    elif debug:
        root_level = logging.INFO
    else:
        root_level = logging.WARNING

    logging.basicConfig(
        level=root_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    logging.getLogger(APP_LOGGER).setLevel(min(root_level, logging.INFO))

    if not verbose:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
