"""Tests for application startup."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from app.app import ProviderUnavailableError, create_app
from app.context import AppContext
from app.services.onebot import OneBotClient
from tests.helpers import RecordingOneBot


def test_startup_probe_succeeds(context, onebot, caplog):
    caplog.set_level("INFO", logger="app")
    with TestClient(create_app(context)) as client:
        assert client.get("/").text == "success"
    assert ("GET", "/get_version_info", None) in onebot.calls
    assert "Successfully connected to onebot api: go-cqhttp, v1.0.0, protocol 5" in caplog.text


def test_startup_aborts_when_provider_unreachable(context):
    down = RecordingOneBot(fail_with=httpx.ConnectError("down"))
    broken = AppContext(
        settings=context.settings,
        client=OneBotClient(context.settings.api_http, transport=down.transport()),
    )
    with pytest.raises(ProviderUnavailableError):
        with TestClient(create_app(broken)):
            pass
