from __future__ import annotations

import dataclasses
from datetime import timedelta

import pytest

from pulse_chat.services import message_service, unseen_service


@pytest.mark.asyncio
async def test_summary_has_entry_for_every_other_user(uow):
    summary = await unseen_service.summarize(1, uow)

    assert set(summary) == {2, 3}
    assert all(s.unseen_count == 0 and s.last_message is None for s in summary.values())


@pytest.mark.asyncio
async def test_unseen_count_matches_unseen_messages_from_counterpart(uow):
    await uow.messages_w.create(2, 1, "a", None)
    await uow.messages_w.create(2, 1, "b", None)
    seen = await uow.messages_w.create(2, 1, "c", None)
    await uow.messages_w.mark_seen(seen.id, seen.created_at)
    await uow.messages_w.create(1, 2, "reply", None)
    await uow.messages_w.create(3, 1, "x", None)

    summary = await unseen_service.summarize(1, uow)

    expected = sum(
        1 for m in uow.messages._messages.values()
        if m.sender_id == 2 and m.receiver_id == 1 and not m.seen
    )
    assert summary[2].unseen_count == expected == 2
    assert summary[3].unseen_count == 1


@pytest.mark.asyncio
async def test_last_message_considers_both_directions(uow):
    await uow.messages_w.create(2, 1, "from bob", None)
    latest = await uow.messages_w.create(1, 2, "from alice", None)

    summary = await unseen_service.summarize(1, uow)

    assert summary[2].last_message == latest
    assert summary[2].unseen_count == 1


@pytest.mark.asyncio
async def test_opening_conversation_clears_count(alice_principal, uow):
    await uow.messages_w.create(2, 1, "a", None)
    await uow.messages_w.create(2, 1, "b", None)

    await message_service.list_conversation(alice_principal, 2, uow)
    summary = await unseen_service.summarize(1, uow)

    assert summary[2].unseen_count == 0
    assert summary[2].last_message is not None


@pytest.mark.asyncio
async def test_sidebar_orders_by_last_seen(alice_principal, uow):
    bob = uow.users._users[2]
    uow.users._users[3] = dataclasses.replace(
        uow.users._users[3], last_seen=bob.last_seen + timedelta(hours=1),
    )
    await uow.messages_w.create(2, 1, "hey", None)

    entries, total = await unseen_service.list_sidebar(alice_principal, uow)

    assert total == 2
    assert [e.user.id for e in entries] == [3, 2]
    assert entries[1].unseen_count == 1
    assert entries[1].last_message.text == "hey"
    assert entries[0].last_message is None
