from __future__ import annotations

from pulse_chat.domain.entities.message import Message
from pulse_chat.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        sender_id=model.sender_id,
        receiver_id=model.receiver_id,
        text=model.text,
        image=model.image,
        seen=model.seen,
        seen_at=model.seen_at,
        created_at=model.created_at,
    )
