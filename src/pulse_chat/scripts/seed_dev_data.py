"""Create the schema and seed development data: two users and a short conversation."""
from __future__ import annotations

import asyncio
import logging

from pulse_chat.infrastructure.auth.bcrypt_hasher import BcryptHasher
from pulse_chat.infrastructure.db.base import Base
from pulse_chat.infrastructure.db import models  # noqa: F401
from pulse_chat.infrastructure.db.session import AsyncSessionLocal, engine
from pulse_chat.infrastructure.db.uow import SqlAlchemyUoW

logger = logging.getLogger(__name__)

DEV_PASSWORD = "password123"


async def create_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Schema ready")


async def seed() -> None:
    hasher = BcryptHasher()
    async with AsyncSessionLocal() as session, SqlAlchemyUoW(session) as uow:
        if await uow.users.get_by_email("alice@example.com") is not None:
            logger.info("Dev data already present, skipping")
            return

        password_hash = await hasher.hash(DEV_PASSWORD)
        alice = await uow.users_w.create("Alice Martin", "alice@example.com", password_hash, "Hi there")
        bob = await uow.users_w.create("Bob Stone", "bob@example.com", password_hash, "")

        conversation = [
            (alice.id, bob.id, "Hey Bob!"),
            (bob.id, alice.id, "Hi Alice, how are you?"),
            (alice.id, bob.id, "Great, thanks. Lunch tomorrow?"),
        ]
        for sender_id, receiver_id, text in conversation:
            await uow.messages_w.create(sender_id, receiver_id, text, None)

        await uow.commit()
        logger.info(
            "Seeded users %s, %s (password %r) with %d messages",
            alice.id, bob.id, DEV_PASSWORD, len(conversation),
        )


async def main_async() -> None:
    await create_schema()
    await seed()
    await engine.dispose()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(main_async())


if __name__ == "__main__":
    main()
