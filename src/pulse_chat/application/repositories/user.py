from __future__ import annotations

from datetime import datetime
from typing import Protocol

from pulse_chat.domain.entities.user import User


class UserReader(Protocol):
    async def get_by_id(self, user_id: int) -> User | None: ...

    async def get_by_email(self, email: str) -> User | None: ...

    async def get_password_hash(self, email: str) -> str | None: ...

    async def exists(self, user_id: int) -> bool: ...

    async def list_others(self, user_id: int) -> list[User]:
        """Every user except ``user_id``, most recently seen first."""
        ...

    async def count_others(self, user_id: int) -> int: ...


class UserWriter(Protocol):
    async def create(
        self,
        full_name: str,
        email: str,
        password_hash: str,
        bio: str,
    ) -> User: ...

    async def update_profile(
        self,
        user_id: int,
        *,
        full_name: str | None = None,
        bio: str | None = None,
        profile_pic: str | None = None,
    ) -> User | None: ...

    async def touch_last_seen(self, user_id: int, ts: datetime) -> None: ...
