"""WebSocket frame envelopes."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pulse_chat.domain.entities.message import Message


class WsInbound(BaseModel):
    """Client → Server."""

    event: str  # ping | pong
    data: Any = None


class WsOutbound(BaseModel):
    """Server → Client."""

    event: str  # getOnlineUsers | newMessage | messageSeen | messageDeleted | ping | pong | error
    data: Any = None


class MessageFrame(BaseModel):
    """``newMessage`` payload; same camelCase shape the REST API returns."""

    model_config = ConfigDict(alias_generator=to_camel, from_attributes=True)

    id: int
    sender_id: int
    receiver_id: int
    text: str | None
    image: str | None
    seen: bool
    seen_at: datetime | None
    created_at: datetime


def message_payload(message: Message) -> dict[str, Any]:
    return MessageFrame.model_validate(message).model_dump(mode="json", by_alias=True)
