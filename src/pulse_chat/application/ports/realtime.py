from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from pulse_chat.domain.entities.message import Message


class SessionHandle(Protocol):
    """One live bidirectional connection that events can be pushed to."""

    session_id: str

    async def send(self, event: str, data: Any) -> None: ...


class MessageNotifier(Protocol):
    """Best-effort push of message events. Implementations never raise."""

    async def message_created(self, message: Message) -> None: ...

    async def message_seen(self, message: Message, seen_at: datetime) -> None: ...

    async def message_deleted(self, message: Message) -> None: ...
