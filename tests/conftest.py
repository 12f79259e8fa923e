"""Shared fixtures."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.app import create_app
from app.config import build_settings
from app.context import AppContext
from app.services.onebot import OneBotClient
from tests.helpers import API_BASE, RecordingOneBot

ROUTES = {
    "open-group": {"target": "group", "to": 111},
    "guarded": {"target": "private", "to": 222, "secret": "s3cret"},
}


@pytest.fixture
def onebot() -> RecordingOneBot:
    return RecordingOneBot()


@pytest.fixture
def context(onebot: RecordingOneBot) -> AppContext:
    settings = build_settings({"api": {"http": API_BASE}, "webhook": ROUTES}, env={})
    return AppContext(
        settings=settings,
        client=OneBotClient(settings.api_http, transport=onebot.transport()),
    )


@pytest.fixture
def client(context: AppContext) -> TestClient:
    # Not used as a context manager, so the startup probe does not run.
    return TestClient(create_app(context))
