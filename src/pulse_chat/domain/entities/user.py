from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class User:
    id: int
    full_name: str
    email: str
    bio: str
    profile_pic: str
    last_seen: datetime
    created_at: datetime
