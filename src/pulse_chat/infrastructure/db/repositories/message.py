from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, case, delete, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pulse_chat.domain.entities.message import Message
from pulse_chat.infrastructure.db.mappers import message as mapper
from pulse_chat.infrastructure.db.models.message import MessageModel


def _between(user_a: int, user_b: int):
    return or_(
        and_(MessageModel.sender_id == user_a, MessageModel.receiver_id == user_b),
        and_(MessageModel.sender_id == user_b, MessageModel.receiver_id == user_a),
    )


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, message_id: int) -> Message | None:
        result = await self._session.get(MessageModel, message_id)
        return mapper.model_to_entity(result) if result else None

    async def list_conversation(self, user_a: int, user_b: int) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(_between(user_a, user_b))
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def count_unseen_by_sender(self, receiver_id: int) -> dict[int, int]:
        stmt = (
            select(MessageModel.sender_id, func.count(MessageModel.id))
            .where(
                MessageModel.receiver_id == receiver_id,
                MessageModel.sender_id != receiver_id,
                MessageModel.seen.is_(False),
            )
            .group_by(MessageModel.sender_id)
        )
        result = await self._session.execute(stmt)
        return {sender_id: count for sender_id, count in result.all()}

    async def latest_per_counterpart(self, user_id: int) -> dict[int, Message]:
        counterpart = case(
            (MessageModel.sender_id == user_id, MessageModel.receiver_id),
            else_=MessageModel.sender_id,
        ).label("counterpart_id")
        rank = (
            func.row_number()
            .over(
                partition_by=counterpart,
                order_by=(MessageModel.created_at.desc(), MessageModel.id.desc()),
            )
            .label("rank")
        )
        ranked = (
            select(MessageModel.id, counterpart, rank)
            .where(
                or_(
                    MessageModel.sender_id == user_id,
                    MessageModel.receiver_id == user_id,
                )
            )
            .subquery()
        )
        stmt = (
            select(ranked.c.counterpart_id, MessageModel)
            .select_from(ranked)
            .join(MessageModel, MessageModel.id == ranked.c.id)
            .where(ranked.c.rank == 1)
        )
        result = await self._session.execute(stmt)
        return {
            counterpart_id: mapper.model_to_entity(model)
            for counterpart_id, model in result.all()
        }


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        sender_id: int,
        receiver_id: int,
        text: str | None,
        image: str | None,
    ) -> Message:
        stmt = (
            insert(MessageModel)
            .values(
                sender_id=sender_id,
                receiver_id=receiver_id,
                text=text,
                image=image,
            )
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        return mapper.model_to_entity(result.scalar_one())

    async def mark_conversation_seen(
        self,
        sender_id: int,
        receiver_id: int,
        seen_at: datetime,
    ) -> int:
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.sender_id == sender_id,
                MessageModel.receiver_id == receiver_id,
                MessageModel.seen.is_(False),
            )
            .values(seen=True, seen_at=seen_at)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def mark_seen(
        self,
        message_id: int,
        seen_at: datetime,
    ) -> tuple[datetime | None, bool]:
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id, MessageModel.seen.is_(False))
            .values(seen=True, seen_at=seen_at)
            .returning(MessageModel.seen_at)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        updated = result.scalar_one_or_none()
        if updated is not None:
            return updated, True

        # Lost the race or already seen: report what is stored.
        current = await self._session.execute(
            select(MessageModel.seen_at).where(MessageModel.id == message_id)
        )
        return current.scalar_one_or_none(), False

    async def delete(self, message_id: int) -> bool:
        stmt = delete(MessageModel).where(MessageModel.id == message_id)
        result = await self._session.execute(stmt)
        return bool(result.rowcount)
