from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Message:
    """A direct message between two users.

    ``text``/``image`` are immutable once stored; only ``seen``/``seen_at``
    change, and only from unseen to seen.
    """

    id: int
    sender_id: int
    receiver_id: int
    text: str | None
    image: str | None
    seen: bool
    seen_at: datetime | None
    created_at: datetime
