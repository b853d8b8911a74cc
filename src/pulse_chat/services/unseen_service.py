from __future__ import annotations

from pulse_chat.application.dto.principal import Principal
from pulse_chat.application.dto.summary import CounterpartSummary, SidebarEntry
from pulse_chat.application.uow import UnitOfWork
from pulse_chat.domain.entities.user import User


async def _summarize_for(
    user_id: int,
    counterparts: list[User],
    uow: UnitOfWork,
) -> dict[int, CounterpartSummary]:
    unseen = await uow.messages.count_unseen_by_sender(user_id)
    latest = await uow.messages.latest_per_counterpart(user_id)
    return {
        user.id: CounterpartSummary(
            unseen_count=unseen.get(user.id, 0),
            last_message=latest.get(user.id),
        )
        for user in counterparts
    }


async def summarize(user_id: int, uow: UnitOfWork) -> dict[int, CounterpartSummary]:
    """Unseen counts and latest message per counterpart, recomputed on every call.

    ``unseen_count`` only counts messages *to* ``user_id``; ``last_message``
    considers both directions regardless of read state.
    """
    counterparts = await uow.users.list_others(user_id)
    return await _summarize_for(user_id, counterparts, uow)


async def list_sidebar(
    principal: Principal,
    uow: UnitOfWork,
) -> tuple[list[SidebarEntry], int]:
    users = await uow.users.list_others(principal.user_id)
    total = await uow.users.count_others(principal.user_id)
    summary = await _summarize_for(principal.user_id, users, uow)
    entries = [
        SidebarEntry(
            user=user,
            unseen_count=summary[user.id].unseen_count,
            last_message=summary[user.id].last_message,
        )
        for user in users
    ]
    return entries, total
