from __future__ import annotations

import logging

from pulse_chat.application.ports.realtime import SessionHandle
from pulse_chat.domain.value_objects.enums import RealtimeEvent
from pulse_chat.infrastructure.ws.registry import PresenceRegistry

logger = logging.getLogger(__name__)


class SessionLifecycle:
    """Registers sessions on connect/disconnect and broadcasts presence changes."""

    def __init__(self, registry: PresenceRegistry) -> None:
        self._registry = registry

    async def connect(self, handle: SessionHandle, user_id: int | None) -> bool:
        """Attach the session; returns whether it was registered as an online user."""
        self._registry.attach(handle)
        if user_id is None:
            logger.debug("Anonymous session connected: %s", handle.session_id)
            return False

        self._registry.register(user_id, handle)
        logger.debug("User %s connected on %s", user_id, handle.session_id)
        await self.broadcast_presence()
        return True

    async def disconnect(self, handle: SessionHandle, user_id: int | None) -> None:
        self._registry.detach(handle)
        if user_id is None:
            return

        if self._registry.unregister(user_id, handle):
            logger.debug("User %s disconnected from %s", user_id, handle.session_id)
            await self.broadcast_presence()
        else:
            logger.debug("Stale session %s closed for user %s", handle.session_id, user_id)

    async def broadcast_presence(self) -> None:
        """Push the full online-user snapshot to every live session."""
        online = self._registry.snapshot()
        for session in self._registry.sessions():
            try:
                await session.send(RealtimeEvent.ONLINE_USERS, online)
            except Exception:
                logger.warning(
                    "Presence push to %s failed", session.session_id, exc_info=True,
                )
