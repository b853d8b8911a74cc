from __future__ import annotations

import pytest

from pulse_chat.infrastructure.ws.lifecycle import SessionLifecycle
from pulse_chat.infrastructure.ws.registry import PresenceRegistry
from tests.conftest import FakeSession


@pytest.fixture
def registry() -> PresenceRegistry:
    return PresenceRegistry()


@pytest.fixture
def lifecycle(registry) -> SessionLifecycle:
    return SessionLifecycle(registry)


@pytest.mark.asyncio
async def test_connect_broadcasts_snapshot_to_every_session(registry, lifecycle):
    anon = FakeSession("anon")
    alice = FakeSession("alice")
    await lifecycle.connect(anon, None)

    assert await lifecycle.connect(alice, 1) is True

    assert anon.events("getOnlineUsers") == [[1]]
    assert alice.events("getOnlineUsers") == [[1]]


@pytest.mark.asyncio
async def test_anonymous_session_is_never_registered(registry, lifecycle):
    anon = FakeSession("anon")

    assert await lifecycle.connect(anon, None) is False

    assert registry.snapshot() == []
    assert anon.sent == []


@pytest.mark.asyncio
async def test_disconnect_broadcasts_new_snapshot(registry, lifecycle):
    alice, bob = FakeSession("alice"), FakeSession("bob")
    await lifecycle.connect(alice, 1)
    await lifecycle.connect(bob, 2)

    await lifecycle.disconnect(alice, 1)

    assert registry.snapshot() == [2]
    assert bob.events("getOnlineUsers")[-1] == [2]


@pytest.mark.asyncio
async def test_stale_disconnect_does_not_evict_reconnect(registry, lifecycle):
    old, new, watcher = FakeSession("old"), FakeSession("new"), FakeSession("watcher")
    await lifecycle.connect(watcher, 9)
    await lifecycle.connect(old, 1)
    await lifecycle.connect(new, 1)
    pushes_before = len(watcher.events("getOnlineUsers"))

    await lifecycle.disconnect(old, 1)

    assert registry.snapshot() == [1, 9]
    assert registry.lookup(1) is new
    assert len(watcher.events("getOnlineUsers")) == pushes_before


@pytest.mark.asyncio
async def test_broken_session_does_not_stop_broadcast(registry, lifecycle):
    broken = FakeSession("broken", broken=True)
    healthy = FakeSession("healthy")
    await lifecycle.connect(broken, 1)
    await lifecycle.connect(healthy, 2)

    assert healthy.events("getOnlineUsers")[-1] == [1, 2]
