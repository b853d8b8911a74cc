from __future__ import annotations

from datetime import datetime
from typing import Protocol

from pulse_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def get_by_id(self, message_id: int) -> Message | None: ...

    async def list_conversation(self, user_a: int, user_b: int) -> list[Message]:
        """Messages exchanged between the two users in either direction, oldest first."""
        ...

    async def count_unseen_by_sender(self, receiver_id: int) -> dict[int, int]:
        """sender_id -> number of unseen messages addressed to ``receiver_id``."""
        ...

    async def latest_per_counterpart(self, user_id: int) -> dict[int, Message]:
        """counterpart_id -> most recent message exchanged with ``user_id``."""
        ...


class MessageWriter(Protocol):
    async def create(
        self,
        sender_id: int,
        receiver_id: int,
        text: str | None,
        image: str | None,
    ) -> Message: ...

    async def mark_conversation_seen(
        self, sender_id: int, receiver_id: int, seen_at: datetime
    ) -> int:
        """Flip every unseen ``sender_id -> receiver_id`` message in one statement.

        Returns the number of messages transitioned.
        """
        ...

    async def mark_seen(
        self, message_id: int, seen_at: datetime
    ) -> tuple[datetime | None, bool]:
        """Conditionally flip one message. Returns (effective seen_at, transitioned)."""
        ...

    async def delete(self, message_id: int) -> bool: ...
