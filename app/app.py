"""the beautiful world start from here."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from app.config import get_settings
from app.context import AppContext, build_context
from app.logging_config import setup_logging
from app.routers import gitlab, info

logger = logging.getLogger(__name__)


class ProviderUnavailableError(RuntimeError):
    """The OneBot backend did not answer the startup probe."""


async def check_provider(context: AppContext) -> None:
    about = await context.client.describe_provider()
    if about is None:
        logger.error("Failed to connect to onebot api at %s", context.client.api_base)
        raise ProviderUnavailableError(context.client.api_base)
    logger.info(
        "Successfully connected to onebot api: %s, %s, protocol %s",
        about.app_name,
        about.app_version,
        about.protocol,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "context", None) is None:
        settings = get_settings()
        setup_logging(settings.debug, settings.verbose)
        app.state.context = build_context(settings)
    await check_provider(app.state.context)
    yield


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """
    Build the ASGI app. Without ``context`` the settings are loaded from the
    config file when the app starts up.
    """
    application = FastAPI(title="GitLab → OneBot notifier", lifespan=lifespan)
    application.state.context = context

    application.include_router(info.router)
    application.include_router(gitlab.router)
    return application


app = create_app()
