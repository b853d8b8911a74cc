from __future__ import annotations

import asyncio
import uuid
from typing import Any

from fastapi import WebSocket

from pulse_chat.infrastructure.ws.protocol import WsOutbound


class WebSocketSession:
    """Session handle for one accepted WebSocket."""

    def __init__(self, websocket: WebSocket) -> None:
        self.session_id = uuid.uuid4().hex
        self._ws = websocket
        # heartbeat, presence broadcasts and dispatcher pushes share the socket
        self._send_lock = asyncio.Lock()

    async def send(self, event: str, data: Any = None) -> None:
        raw = WsOutbound(event=event, data=data).model_dump_json()
        async with self._send_lock:
            await self._ws.send_text(raw)

    def __repr__(self) -> str:
        return f"WebSocketSession({self.session_id})"
