from __future__ import annotations

import logging
from types import TracebackType
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession

from pulse_chat.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from pulse_chat.infrastructure.db.repositories.user import UserReaderRepo, UserWriterRepo

logger = logging.getLogger(__name__)


class SqlAlchemyUoW:
    """One AsyncSession shared by the user and message repositories.

    Services commit explicitly; leaving the context with an exception rolls
    back whatever was not committed.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.users = UserReaderRepo(session)
        self.users_w = UserWriterRepo(session)
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)

    async def flush(self) -> None:
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            return
        if self._session.in_transaction():
            logger.debug("Rolling back after %s", exc_type.__name__)
            await self.rollback()
