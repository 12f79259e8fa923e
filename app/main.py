"""Command-line entry point: ``gitlab-onebot`` or ``python -m app.main``."""

from __future__ import annotations

import logging
import sys

import uvicorn

from app.app import create_app
from app.config import ConfigError, get_settings
from app.context import build_context
from app.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    try:
        settings = get_settings()
    except ConfigError as exc:
        setup_logging()
        logger.error("%s", exc)
        sys.exit(1)

    setup_logging(settings.debug, settings.verbose)
    logger.info("Start listening on %s", settings.listen)
    uvicorn.run(
        create_app(build_context(settings)),
        host=settings.listen_host,
        port=settings.listen_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
