from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from pulse_chat.api.deps import get_verifier
from pulse_chat.config import settings
from pulse_chat.domain.value_objects.enums import RealtimeEvent
from pulse_chat.infrastructure.ws.lifecycle import SessionLifecycle
from pulse_chat.infrastructure.ws.protocol import WsInbound
from pulse_chat.infrastructure.ws.session import WebSocketSession

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

WS_AUTH_FAILED = 4001


class _AuthFailed(Exception):
    pass


def _parse_user_id(raw: str | None) -> int | None:
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


async def _resolve_user_id(user_id_raw: str | None, token: str | None) -> int | None:
    """Return the session's user id, or None for an anonymous session.

    ``userId`` is trusted as authenticated upstream. A ``token``, when sent,
    must verify and agree with it.
    """
    user_id = _parse_user_id(user_id_raw)
    if not token:
        return user_id

    try:
        principal = await get_verifier().verify(token)
    except Exception as exc:
        logger.debug("WS auth failed", exc_info=True)
        raise _AuthFailed from exc

    if user_id is not None and user_id != principal.user_id:
        raise _AuthFailed
    return principal.user_id


@router.websocket("/ws")
async def ws_presence(
    websocket: WebSocket,
    user_id_raw: str | None = Query(None, alias="userId"),
    token: str | None = Query(None),
) -> None:
    try:
        user_id = await _resolve_user_id(user_id_raw, token)
    except _AuthFailed:
        await websocket.close(code=WS_AUTH_FAILED, reason="Authentication failed")
        return

    lifecycle: SessionLifecycle = websocket.app.state.lifecycle
    session = WebSocketSession(websocket)
    await websocket.accept()
    await lifecycle.connect(session, user_id)

    heartbeat_task = asyncio.create_task(
        _heartbeat(session), name=f"ws-heartbeat-{session.session_id}",
    )
    try:
        await _read_loop(websocket, session)
    except WebSocketDisconnect:
        pass
    except TimeoutError:
        logger.warning(
            "Heartbeat timeout for session %s (user=%s)", session.session_id, user_id,
        )
        await _close_quietly(websocket)
    except Exception:
        logger.exception("WS error for session %s", session.session_id)
    finally:
        heartbeat_task.cancel()
        await lifecycle.disconnect(session, user_id)


async def _heartbeat(session: WebSocketSession) -> None:
    interval = settings.WS_HEARTBEAT_INTERVAL
    try:
        while True:
            await asyncio.sleep(interval)
            await session.send(RealtimeEvent.PING)
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("Heartbeat stopped for %s", session.session_id, exc_info=True)


async def _read_loop(ws: WebSocket, session: WebSocketSession) -> None:
    """Consume inbound frames; any frame counts as a heartbeat.

    Raises TimeoutError when nothing arrives within the heartbeat timeout.
    """
    while True:
        raw = await asyncio.wait_for(ws.receive_text(), timeout=settings.WS_HEARTBEAT_TIMEOUT)
        try:
            msg = WsInbound.model_validate_json(raw)
        except Exception:
            await session.send(RealtimeEvent.ERROR, {"code": "invalid_payload"})
            continue

        if msg.event == RealtimeEvent.PING:
            await session.send(RealtimeEvent.PONG)
        elif msg.event == RealtimeEvent.PONG:
            continue
        else:
            await session.send(RealtimeEvent.ERROR, {"code": "unknown_event", "event": msg.event})


async def _close_quietly(ws: WebSocket) -> None:
    try:
        await ws.close(code=status.WS_1001_GOING_AWAY)
    except Exception:
        logger.debug("Close after heartbeat timeout failed", exc_info=True)
