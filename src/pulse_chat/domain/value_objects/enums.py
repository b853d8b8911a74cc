from __future__ import annotations

from enum import StrEnum


class RealtimeEvent(StrEnum):
    ONLINE_USERS = "getOnlineUsers"
    NEW_MESSAGE = "newMessage"
    MESSAGE_SEEN = "messageSeen"
    MESSAGE_DELETED = "messageDeleted"
    PING = "ping"
    PONG = "pong"
    ERROR = "error"


class AttachmentType(StrEnum):
    JPEG = "image/jpeg"
    PNG = "image/png"
    GIF = "image/gif"
    WEBP = "image/webp"
