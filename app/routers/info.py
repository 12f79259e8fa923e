"""Ruter Ingfo?"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def heartbeat():
    """
    Simple liveness endpoint.
    """
    return "success"
