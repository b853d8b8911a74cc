from __future__ import annotations

from datetime import datetime

from pulse_chat.api.v1.schemas.common import CamelModel, Envelope
from pulse_chat.api.v1.schemas.user import UserResponse


class MessageResponse(CamelModel):
    id: int
    sender_id: int
    receiver_id: int
    text: str | None
    image: str | None
    seen: bool
    seen_at: datetime | None
    created_at: datetime


class ConversationResponse(Envelope):
    messages: list[MessageResponse]


class SendMessageResponse(CamelModel):
    success: bool = True
    message: MessageResponse


class MarkSeenResponse(Envelope):
    seen_at: datetime


class SidebarUserResponse(UserResponse):
    unseen_count: int
    last_message: MessageResponse | None


class SidebarResponse(Envelope):
    users: list[SidebarUserResponse]
    total: int
