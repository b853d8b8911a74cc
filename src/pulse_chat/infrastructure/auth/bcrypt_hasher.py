"""Password hashing with bcrypt, off the event loop."""
from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor

import bcrypt

_executor = ThreadPoolExecutor(max_workers=4)


class BcryptHasher:
    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    async def hash(self, password: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            _executor,
            lambda: bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._rounds)).decode(),
        )

    async def verify(self, password: str, hashed: str) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            _executor,
            lambda: bcrypt.checkpw(password.encode(), hashed.encode()),
        )
