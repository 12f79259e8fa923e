"""OneBot (QQ bot HTTP API) client"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from app.models import DeliveryOutcome, DestinationKind, OutboundMessage, ProviderInfo
from app.schemas import SendMessageResponse, VersionInfoResponse

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_SECONDS = 15

SEND_PRIVATE_PATH = "/send_private_msg"
SEND_GROUP_PATH = "/send_group_msg"
VERSION_INFO_PATH = "/get_version_info"

JSONDict = dict[str, Any]


def build_payload(message: OutboundMessage) -> tuple[str, JSONDict]:
    """Return the endpoint path and JSON body for ``message``."""
    if message.destination_kind is DestinationKind.PRIVATE:
        return SEND_PRIVATE_PATH, {
            "user_id": message.destination_id,
            "group_id": None,
            "message": message.body,
            "auto_escape": False,
        }
    return SEND_GROUP_PATH, {
        "group_id": message.destination_id,
        "message": message.body,
        "auto_escape": False,
    }


class OneBotClient:
    """
    Talks to a OneBot HTTP endpoint rooted at ``api_base``.

    ``transport`` is handed to every ``httpx.AsyncClient`` the client opens,
    which lets tests plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        api_base: str,
        *,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def url(self, path: str) -> str:
        return f"{self.api_base}{path}"

    async def deliver(self, message: OutboundMessage) -> DeliveryOutcome:
        """Send ``message``; never raises on transport or decoding errors."""
        path, payload = build_payload(message)
        try:
            async with self._client() as client:
                resp = await client.post(self.url(path), json=payload)
        except httpx.HTTPError as exc:
            logger.warning("OneBot %s request failed: %s", path, exc)
            return DeliveryOutcome(success=False)

        try:
            envelope = SendMessageResponse.model_validate_json(resp.content)
        except ValueError as exc:
            logger.warning(
                "OneBot %s returned an unreadable response (%s): %s",
                path,
                resp.status_code,
                exc,
            )
            return DeliveryOutcome(success=False)

        logger.debug(
            "OneBot %s -> retcode=%s status=%s", path, envelope.retcode, envelope.status
        )
        return DeliveryOutcome(success=True, message_id=envelope.data.message_id)

    async def describe_provider(self) -> Optional[ProviderInfo]:
        """Version info of the backend, or ``None`` if it cannot be reached."""
        try:
            async with self._client() as client:
                resp = await client.get(self.url(VERSION_INFO_PATH))
            about = VersionInfoResponse.model_validate_json(resp.content).data
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("OneBot version probe failed: %s", exc)
            return None
        return ProviderInfo(
            app_name=about.app_name,
            app_version=about.app_version,
            protocol=about.protocol,
        )
