"""Best-effort push of message events to whichever participants are online.

No retry, acknowledgement or queueing happens here; the message store is the
durable record and offline users catch up on their next conversation fetch.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

from pulse_chat.domain.entities.message import Message
from pulse_chat.domain.value_objects.enums import RealtimeEvent
from pulse_chat.infrastructure.ws.protocol import message_payload
from pulse_chat.infrastructure.ws.registry import PresenceRegistry

logger = logging.getLogger(__name__)


class DeliveryDispatcher:
    def __init__(self, registry: PresenceRegistry) -> None:
        self._registry = registry

    async def message_created(self, message: Message) -> None:
        await self._push(
            (message.sender_id, message.receiver_id),
            RealtimeEvent.NEW_MESSAGE,
            message_payload(message),
        )

    async def message_seen(self, message: Message, seen_at: datetime) -> None:
        await self._push(
            (message.sender_id,),
            RealtimeEvent.MESSAGE_SEEN,
            {"messageId": message.id, "seenAt": seen_at.isoformat()},
        )

    async def message_deleted(self, message: Message) -> None:
        await self._push(
            (message.sender_id, message.receiver_id),
            RealtimeEvent.MESSAGE_DELETED,
            message.id,
        )

    async def _push(self, user_ids: Iterable[int], event: str, data: Any) -> None:
        for user_id in dict.fromkeys(user_ids):
            handle = self._registry.lookup(user_id)
            if handle is None:
                continue
            try:
                await handle.send(event, data)
            except Exception:
                logger.warning(
                    "Push of %s to user %s failed", event, user_id, exc_info=True,
                )
