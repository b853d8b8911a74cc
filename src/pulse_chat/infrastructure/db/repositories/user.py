from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pulse_chat.domain.entities.user import User
from pulse_chat.infrastructure.db.mappers import user as mapper
from pulse_chat.infrastructure.db.models.user import UserModel


class UserReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: int) -> User | None:
        result = await self._session.get(UserModel, user_id)
        return mapper.model_to_entity(result) if result else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(UserModel.email == email)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def get_password_hash(self, email: str) -> str | None:
        stmt = select(UserModel.password_hash).where(UserModel.email == email)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, user_id: int) -> bool:
        stmt = select(UserModel.id).where(UserModel.id == user_id).limit(1)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_others(self, user_id: int) -> list[User]:
        stmt = (
            select(UserModel)
            .where(UserModel.id != user_id)
            .order_by(UserModel.last_seen.desc(), UserModel.id)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def count_others(self, user_id: int) -> int:
        stmt = select(func.count(UserModel.id)).where(UserModel.id != user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one()


class UserWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        full_name: str,
        email: str,
        password_hash: str,
        bio: str,
    ) -> User:
        model = UserModel(
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            bio=bio,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return mapper.model_to_entity(model)

    async def update_profile(
        self,
        user_id: int,
        *,
        full_name: str | None = None,
        bio: str | None = None,
        profile_pic: str | None = None,
    ) -> User | None:
        values = {
            key: value
            for key, value in (
                ("full_name", full_name),
                ("bio", bio),
                ("profile_pic", profile_pic),
            )
            if value
        }
        if values:
            stmt = (
                update(UserModel)
                .where(UserModel.id == user_id)
                .values(**values)
                .returning(UserModel)
                .execution_options(synchronize_session=False)
            )
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        else:
            model = await self._session.get(UserModel, user_id)
        return mapper.model_to_entity(model) if model else None

    async def touch_last_seen(self, user_id: int, ts: datetime) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(last_seen=ts)
        )
        await self._session.execute(stmt)
