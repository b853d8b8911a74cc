"""Shared test fixtures."""
from __future__ import annotations

import dataclasses
import itertools
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from pulse_chat.application.dto.principal import Principal
from pulse_chat.application.exceptions import UpstreamDependencyError
from pulse_chat.domain.entities.message import Message
from pulse_chat.domain.entities.user import User

_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def alice_principal() -> Principal:
    return Principal(user_id=1)


@pytest.fixture
def bob_principal() -> Principal:
    return Principal(user_id=2)


def make_user(user_id: int, *, name: str | None = None, last_seen: datetime | None = None) -> User:
    return User(
        id=user_id,
        full_name=name or f"User {user_id}",
        email=f"user{user_id}@example.com",
        bio="",
        profile_pic="",
        last_seen=last_seen or _EPOCH,
        created_at=_EPOCH,
    )


@dataclass
class FakeUserReader:
    _users: dict[int, User] = field(default_factory=dict)
    _passwords: dict[str, str] = field(default_factory=dict)

    async def get_by_id(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email), None)

    async def get_password_hash(self, email: str) -> str | None:
        return self._passwords.get(email)

    async def exists(self, user_id: int) -> bool:
        return user_id in self._users

    async def list_others(self, user_id: int) -> list[User]:
        others = [u for u in self._users.values() if u.id != user_id]
        return sorted(others, key=lambda u: (-u.last_seen.timestamp(), u.id))

    async def count_others(self, user_id: int) -> int:
        return sum(1 for u in self._users.values() if u.id != user_id)


@dataclass
class FakeUserWriter:
    _reader: FakeUserReader

    async def create(self, full_name: str, email: str, password_hash: str, bio: str) -> User:
        user_id = max(self._reader._users, default=0) + 1
        user = dataclasses.replace(make_user(user_id, name=full_name), email=email, bio=bio)
        self._reader._users[user_id] = user
        self._reader._passwords[email] = password_hash
        return user

    async def update_profile(
        self,
        user_id: int,
        *,
        full_name: str | None = None,
        bio: str | None = None,
        profile_pic: str | None = None,
    ) -> User | None:
        user = self._reader._users.get(user_id)
        if user is None:
            return None
        changes = {
            k: v
            for k, v in (("full_name", full_name), ("bio", bio), ("profile_pic", profile_pic))
            if v
        }
        user = dataclasses.replace(user, **changes)
        self._reader._users[user_id] = user
        return user

    async def touch_last_seen(self, user_id: int, ts: datetime) -> None:
        user = self._reader._users.get(user_id)
        if user is not None:
            self._reader._users[user_id] = dataclasses.replace(user, last_seen=ts)


@dataclass
class FakeMessageReader:
    """Mirrors the SQL repository: (created_at, id) ordering, per-counterpart aggregates."""

    _messages: dict[int, Message] = field(default_factory=dict)

    async def get_by_id(self, message_id: int) -> Message | None:
        return self._messages.get(message_id)

    async def list_conversation(self, user_a: int, user_b: int) -> list[Message]:
        pair = {user_a, user_b}
        found = [
            m for m in self._messages.values()
            if {m.sender_id, m.receiver_id} == pair
        ]
        return sorted(found, key=lambda m: (m.created_at, m.id))

    async def count_unseen_by_sender(self, receiver_id: int) -> dict[int, int]:
        counts: dict[int, int] = {}
        for m in self._messages.values():
            if m.receiver_id == receiver_id and m.sender_id != receiver_id and not m.seen:
                counts[m.sender_id] = counts.get(m.sender_id, 0) + 1
        return counts

    async def latest_per_counterpart(self, user_id: int) -> dict[int, Message]:
        latest: dict[int, Message] = {}
        for m in sorted(self._messages.values(), key=lambda m: (m.created_at, m.id)):
            if user_id in (m.sender_id, m.receiver_id):
                counterpart = m.receiver_id if m.sender_id == user_id else m.sender_id
                latest[counterpart] = m
        return latest


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    _ids: Any = field(default_factory=lambda: itertools.count(1))
    fail_create: bool = False

    async def create(
        self,
        sender_id: int,
        receiver_id: int,
        text: str | None,
        image: str | None,
    ) -> Message:
        if self.fail_create:
            raise RuntimeError("insert failed")
        message_id = next(self._ids)
        message = Message(
            id=message_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            text=text,
            image=image,
            seen=False,
            seen_at=None,
            created_at=_EPOCH + timedelta(seconds=message_id),
        )
        self._reader._messages[message_id] = message
        return message

    async def mark_conversation_seen(self, sender_id: int, receiver_id: int, seen_at: datetime) -> int:
        marked = 0
        for m in list(self._reader._messages.values()):
            if m.sender_id == sender_id and m.receiver_id == receiver_id and not m.seen:
                self._reader._messages[m.id] = dataclasses.replace(m, seen=True, seen_at=seen_at)
                marked += 1
        return marked

    async def mark_seen(self, message_id: int, seen_at: datetime) -> tuple[datetime | None, bool]:
        m = self._reader._messages.get(message_id)
        if m is None:
            return None, False
        if m.seen:
            return m.seen_at, False
        self._reader._messages[message_id] = dataclasses.replace(m, seen=True, seen_at=seen_at)
        return seen_at, True

    async def delete(self, message_id: int) -> bool:
        return self._reader._messages.pop(message_id, None) is not None


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    users: FakeUserReader = field(default_factory=FakeUserReader)
    users_w: FakeUserWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    _committed: bool = False

    def __post_init__(self) -> None:
        if self.users_w is None:
            self.users_w = FakeUserWriter(self.users)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    def add_users(self, *user_ids: int) -> None:
        for user_id in user_ids:
            self.users._users[user_id] = make_user(user_id)

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        pass


@dataclass
class FakeSession:
    """Session handle that records pushed events."""

    session_id: str
    sent: list[tuple[str, Any]] = field(default_factory=list)
    broken: bool = False

    async def send(self, event: str, data: Any = None) -> None:
        if self.broken:
            raise ConnectionError("socket closed")
        self.sent.append((str(event), data))

    def events(self, name: str) -> list[Any]:
        return [data for event, data in self.sent if event == name]


@dataclass
class FakeNotifier:
    created: list[Message] = field(default_factory=list)
    seen: list[tuple[Message, datetime]] = field(default_factory=list)
    deleted: list[Message] = field(default_factory=list)

    async def message_created(self, message: Message) -> None:
        self.created.append(message)

    async def message_seen(self, message: Message, seen_at: datetime) -> None:
        self.seen.append((message, seen_at))

    async def message_deleted(self, message: Message) -> None:
        self.deleted.append(message)


@dataclass
class FakeAttachmentStore:
    saved: dict[str, bytes] = field(default_factory=dict)
    deleted: list[str] = field(default_factory=list)
    fail_save: bool = False
    fail_delete: bool = False

    async def save(self, data: bytes, filename: str, content_type: str) -> str:
        if self.fail_save:
            raise UpstreamDependencyError("Failed to store attachment")
        reference = f"/media/{len(self.saved) + 1}-{filename}"
        self.saved[reference] = data
        return reference

    async def delete(self, reference: str) -> None:
        if self.fail_delete:
            raise UpstreamDependencyError("Failed to remove attachment")
        self.deleted.append(reference)
        self.saved.pop(reference, None)


class FakeHasher:
    async def hash(self, password: str) -> str:
        return f"hashed:{password}"

    async def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class FakeIssuer:
    def issue(self, user_id: int) -> str:
        return f"token-{user_id}"


@pytest.fixture
def uow() -> FakeUoW:
    uow = FakeUoW()
    uow.add_users(1, 2, 3)
    return uow


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def attachments() -> FakeAttachmentStore:
    return FakeAttachmentStore()


@pytest.fixture
def empty_uow() -> FakeUoW:
    return FakeUoW()


@pytest.fixture
def hasher() -> FakeHasher:
    return FakeHasher()


@pytest.fixture
def issuer() -> FakeIssuer:
    return FakeIssuer()
