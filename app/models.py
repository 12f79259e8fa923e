"""models for routes and deliveries"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DestinationKind(str, Enum):
    """Where a message goes on the OneBot side."""

    GROUP = "group"
    PRIVATE = "private"


class Route(BaseModel):
    """
    A webhook route loaded from the ``[webhook.<identifier>]`` config tables.

    Fields
    ------
    destination_id : int
        QQ group number or user id (config key ``to``).
    destination_kind : DestinationKind
        ``group`` or ``private`` (config key ``target``).
    secret : str
        Expected ``X-Gitlab-Token``; empty disables the check.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    destination_id: int = Field(alias="to")
    destination_kind: DestinationKind = Field(alias="target")
    secret: str = ""


@dataclass(frozen=True)
class OutboundMessage:
    """Message"""

    destination_id: int
    destination_kind: DestinationKind
    body: str

    @classmethod
    def for_route(cls, route: Route, body: str) -> OutboundMessage:
        return cls(
            destination_id=route.destination_id,
            destination_kind=route.destination_kind,
            body=body,
        )


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of one send attempt."""

    success: bool
    message_id: Optional[int] = None


@dataclass(frozen=True)
class ProviderInfo:
    """Provider"""

    app_name: str
    app_version: str
    protocol: int


@dataclass(frozen=True)
class WebhookResult:
    """Status code and plain-text body returned to the webhook caller."""

    status_code: int
    detail: str
