from __future__ import annotations

from dataclasses import dataclass

from pulse_chat.domain.entities.message import Message
from pulse_chat.domain.entities.user import User


@dataclass(frozen=True, slots=True)
class CounterpartSummary:
    unseen_count: int = 0
    last_message: Message | None = None


@dataclass(frozen=True, slots=True)
class SidebarEntry:
    user: User
    unseen_count: int
    last_message: Message | None
