"""Ruter GitLab"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import PlainTextResponse

from app.context import AppContext, get_context
from app.services.dispatcher import handle_webhook

router = APIRouter(tags=["gitlab"])


@router.post("/{identifier}", response_class=PlainTextResponse)
async def gitlab_webhook(
    identifier: str,
    request: Request,
    x_gitlab_token: str | None = Header(None),
    context: AppContext = Depends(get_context),
):
    """
    GitLab webhook endpoint.

    `identifier` selects a `[webhook.<identifier>]` route that names the OneBot
    destination and, optionally, the secret expected in `X-Gitlab-Token`.
    """
    body = await request.body()
    result = await handle_webhook(context, identifier, x_gitlab_token, body)
    return PlainTextResponse(result.detail, status_code=result.status_code)
