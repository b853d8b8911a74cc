from __future__ import annotations

import logging
from datetime import datetime, timezone

from pulse_chat.application.dto.message import AttachmentUpload
from pulse_chat.application.dto.principal import Principal
from pulse_chat.application.exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from pulse_chat.application.ports.attachments import AttachmentStore
from pulse_chat.application.ports.realtime import MessageNotifier
from pulse_chat.application.uow import UnitOfWork
from pulse_chat.config import settings
from pulse_chat.domain.entities.message import Message

logger = logging.getLogger(__name__)


def _validate_attachment(attachment: AttachmentUpload) -> None:
    if attachment.content_type not in settings.ATTACHMENT_ALLOWED_TYPES:
        raise ValidationError("Only image files are allowed (JPEG, PNG, GIF, WEBP)")
    if attachment.size > settings.ATTACHMENT_MAX_BYTES:
        raise ValidationError("Image is too large")
    if attachment.size == 0:
        raise ValidationError("Image is empty")


async def _discard_attachment(attachments: AttachmentStore, reference: str) -> None:
    try:
        await attachments.delete(reference)
    except Exception:
        logger.warning("Failed to remove attachment %s", reference, exc_info=True)


async def send_message(
    principal: Principal,
    receiver_id: int,
    text: str | None,
    attachment: AttachmentUpload | None,
    uow: UnitOfWork,
    attachments: AttachmentStore,
    notifier: MessageNotifier,
) -> Message:
    """Persist a new message, then push it to whichever participant is online.

    The push happens after commit and is best-effort; the stored message is
    returned regardless of delivery.
    """
    text = (text or "").strip() or None
    if text is None and attachment is None:
        raise ValidationError("Message must contain text or image")
    if attachment is not None:
        _validate_attachment(attachment)

    if not await uow.users.exists(receiver_id):
        raise NotFoundError("Receiver not found")

    image = None
    if attachment is not None:
        image = await attachments.save(
            attachment.data, attachment.filename, attachment.content_type,
        )

    try:
        message = await uow.messages_w.create(principal.user_id, receiver_id, text, image)
        await uow.users_w.touch_last_seen(principal.user_id, message.created_at)
        await uow.commit()
    except Exception:
        if image is not None:
            await _discard_attachment(attachments, image)
        raise

    await notifier.message_created(message)
    return message


async def list_conversation(
    principal: Principal,
    counterpart_id: int,
    uow: UnitOfWork,
) -> list[Message]:
    """Return the conversation oldest-first, marking the counterpart's messages as seen.

    Opening a conversation is the read receipt: every unseen message sent by
    the counterpart to the caller is flipped in one statement before the read.
    """
    if not await uow.users.exists(counterpart_id):
        raise NotFoundError("User not found")

    now = datetime.now(timezone.utc)
    marked = await uow.messages_w.mark_conversation_seen(counterpart_id, principal.user_id, now)
    messages = await uow.messages.list_conversation(principal.user_id, counterpart_id)
    await uow.commit()

    if marked:
        logger.debug(
            "Marked %d messages from %s to %s as seen",
            marked, counterpart_id, principal.user_id,
        )
    return messages


async def get_message(message_id: int, uow: UnitOfWork) -> Message:
    message = await uow.messages.get_by_id(message_id)
    if message is None:
        raise NotFoundError("Message not found")
    return message


async def mark_seen(
    principal: Principal,
    message_id: int,
    uow: UnitOfWork,
    notifier: MessageNotifier,
) -> datetime:
    """Mark one message as seen by its receiver. Idempotent."""
    message = await get_message(message_id, uow)
    if message.receiver_id != principal.user_id:
        raise AuthorizationError("Not authorized to mark this message")

    if message.seen:
        return message.seen_at

    seen_at, transitioned = await uow.messages_w.mark_seen(
        message_id, datetime.now(timezone.utc),
    )
    if seen_at is None:
        # Deleted between the read and the update.
        raise NotFoundError("Message not found")
    await uow.commit()

    if transitioned:
        await notifier.message_seen(message, seen_at)
    return seen_at


async def delete_message(
    principal: Principal,
    message_id: int,
    uow: UnitOfWork,
    attachments: AttachmentStore,
    notifier: MessageNotifier,
) -> None:
    message = await get_message(message_id, uow)
    if message.sender_id != principal.user_id:
        raise AuthorizationError("Not authorized to delete this message")

    await uow.messages_w.delete(message_id)
    await uow.commit()

    if message.image:
        await _discard_attachment(attachments, message.image)

    await notifier.message_deleted(message)
