"""Authenticate, render and relay one GitLab webhook call."""

from __future__ import annotations

import logging
from typing import Optional

from app.context import AppContext
from app.models import OutboundMessage, Route, WebhookResult
from app.schemas import UnrecognizedEvent, parse_event
from app.services.gitlab import UnknownActionError, render

logger = logging.getLogger(__name__)

SUCCESS = WebhookResult(200, "success")
UNKNOWN_EVENT = WebhookResult(400, "unknown event")
EMPTY_TOKEN = WebhookResult(401, "unauthorized (empty token)")
INCORRECT_TOKEN = WebhookResult(401, "unauthorized (incorrect token)")
NOT_FOUND = WebhookResult(404, "webhook not found")


def check_token(route: Route, token: Optional[str]) -> Optional[WebhookResult]:
    """
    Compare the ``X-Gitlab-Token`` header with the route secret.

    Returns ``None`` when the call is allowed. Plain string equality is used,
    not a constant-time comparison.
    """
    if not route.secret:
        return None
    if token is None:
        return EMPTY_TOKEN
    if token != route.secret:
        return INCORRECT_TOKEN
    return None


async def _deliver_best_effort(
    context: AppContext, identifier: str, message: OutboundMessage
) -> None:
    outcome = await context.client.deliver(message)
    if outcome.success:
        logger.info(
            "Webhook %s delivered to %s %s (message_id=%s)",
            identifier,
            message.destination_kind.value,
            message.destination_id,
            outcome.message_id,
        )
    else:
        logger.warning(
            "Webhook %s could not be delivered to %s %s",
            identifier,
            message.destination_kind.value,
            message.destination_id,
        )


async def handle_webhook(
    context: AppContext,
    identifier: str,
    token: Optional[str],
    body: bytes,
) -> WebhookResult:
    """
    Run the full pipeline for a ``POST /{identifier}`` call.

    The returned status never depends on whether delivery succeeded.
    """
    route = context.route(identifier)
    if route is None:
        logger.error("No webhook found for identifier %s", identifier)
        return NOT_FOUND

    denied = check_token(route, token)
    if denied is EMPTY_TOKEN:
        logger.error("Webhook %s is called without token", identifier)
        return denied
    if denied is not None:
        logger.error("Webhook %s is called with incorrect token", identifier)
        return denied

    event = parse_event(body)
    try:
        text = render(event)
    except UnknownActionError as exc:
        logger.error("Webhook %s: %s", identifier, exc)
        return WebhookResult(400, exc.detail)

    await _deliver_best_effort(context, identifier, OutboundMessage.for_route(route, text))

    if isinstance(event, UnrecognizedEvent):
        logger.error("Webhook %s received an unknown event: %s", identifier, event.error)
        return UNKNOWN_EVENT
    return SUCCESS
