"""Shared, read-only state handed to every request."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from fastapi import Request

from app.config import Settings
from app.models import Route
from app.services.onebot import OneBotClient


@dataclass(frozen=True)
class AppContext:
    settings: Settings
    client: OneBotClient

    @property
    def webhooks(self) -> Mapping[str, Route]:
        return self.settings.webhooks

    def route(self, identifier: str) -> Optional[Route]:
        return self.settings.webhooks.get(identifier)


def build_context(settings: Settings) -> AppContext:
    """Create the context (and its OneBot client) for ``settings``."""
    return AppContext(
        settings=settings,
        client=OneBotClient(settings.api_http, timeout=settings.timeout),
    )


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context stored on ``app.state``."""
    return request.app.state.context
