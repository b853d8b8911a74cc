"""In-process presence registry: which user is online on which session."""
from __future__ import annotations

import logging
import threading

from pulse_chat.application.ports.realtime import SessionHandle

logger = logging.getLogger(__name__)


class PresenceRegistry:
    """Maps user ids to their single live session and tracks every open session.

    A user has at most one entry; registering again replaces the previous
    handle (last connection wins). Every method holds one lock for its whole
    body and never awaits, so callers on the event loop or on worker threads
    observe either the state before or after a mutation.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._online: dict[int, SessionHandle] = {}
        self._sessions: dict[str, SessionHandle] = {}

    def attach(self, handle: SessionHandle) -> None:
        with self._lock:
            self._sessions[handle.session_id] = handle

    def detach(self, handle: SessionHandle) -> None:
        with self._lock:
            if self._sessions.get(handle.session_id) is handle:
                del self._sessions[handle.session_id]

    def register(self, user_id: int, handle: SessionHandle) -> None:
        with self._lock:
            previous = self._online.get(user_id)
            self._online[user_id] = handle
        if previous is not None and previous is not handle:
            logger.debug(
                "User %s re-registered: %s replaces %s",
                user_id, handle.session_id, previous.session_id,
            )

    def unregister(self, user_id: int, handle: SessionHandle) -> bool:
        """Drop the entry only if it still points at ``handle``."""
        with self._lock:
            if self._online.get(user_id) is not handle:
                return False
            del self._online[user_id]
            return True

    def lookup(self, user_id: int) -> SessionHandle | None:
        with self._lock:
            return self._online.get(user_id)

    def snapshot(self) -> list[int]:
        with self._lock:
            return sorted(self._online)

    def sessions(self) -> list[SessionHandle]:
        with self._lock:
            return list(self._sessions.values())
