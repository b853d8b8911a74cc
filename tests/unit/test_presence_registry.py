from __future__ import annotations

import threading

from pulse_chat.infrastructure.ws.registry import PresenceRegistry
from tests.conftest import FakeSession


def test_register_makes_user_visible():
    registry = PresenceRegistry()
    session = FakeSession("s1")

    registry.register(1, session)

    assert registry.lookup(1) is session
    assert registry.snapshot() == [1]


def test_register_same_user_replaces_entry():
    registry = PresenceRegistry()
    first, second = FakeSession("s1"), FakeSession("s2")

    registry.register(1, first)
    registry.register(1, second)

    assert registry.snapshot() == [1]
    assert registry.lookup(1) is second


def test_stale_unregister_keeps_newer_session():
    registry = PresenceRegistry()
    first, second = FakeSession("s1"), FakeSession("s2")
    registry.register(1, first)
    registry.register(1, second)

    removed = registry.unregister(1, first)

    assert removed is False
    assert registry.lookup(1) is second
    assert registry.snapshot() == [1]


def test_unregister_current_session_removes_user():
    registry = PresenceRegistry()
    session = FakeSession("s1")
    registry.register(1, session)

    assert registry.unregister(1, session) is True
    assert registry.lookup(1) is None
    assert registry.snapshot() == []
    assert registry.unregister(1, session) is False


def test_snapshot_is_a_copy():
    registry = PresenceRegistry()
    registry.register(2, FakeSession("s2"))
    registry.register(1, FakeSession("s1"))

    snap = registry.snapshot()
    registry.register(3, FakeSession("s3"))

    assert snap == [1, 2]
    assert registry.snapshot() == [1, 2, 3]


def test_attach_detach_tracks_all_sessions():
    registry = PresenceRegistry()
    anon, named = FakeSession("anon"), FakeSession("named")
    registry.attach(anon)
    registry.attach(named)
    registry.register(5, named)

    assert {s.session_id for s in registry.sessions()} == {"anon", "named"}
    assert registry.snapshot() == [5]

    registry.detach(anon)
    assert [s.session_id for s in registry.sessions()] == ["named"]


def test_concurrent_reconnects_leave_one_entry_per_user():
    registry = PresenceRegistry()
    sessions = [FakeSession(f"s{i}") for i in range(200)]

    def churn(chunk: list[FakeSession]) -> None:
        for session in chunk:
            registry.register(1, session)
            registry.unregister(1, session)
            registry.register(1, session)

    threads = [
        threading.Thread(target=churn, args=(sessions[i::4],)) for i in range(4)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert registry.snapshot() == [1]
    assert registry.lookup(1) in sessions
