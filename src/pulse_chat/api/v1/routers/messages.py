from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile, status

from pulse_chat.api.deps import AttachmentsDep, CurrentPrincipal, NotifierDep, UoWDep
from pulse_chat.api.v1.schemas.common import Envelope
from pulse_chat.api.v1.schemas.message import (
    ConversationResponse,
    MarkSeenResponse,
    MessageResponse,
    SendMessageResponse,
    SidebarResponse,
    SidebarUserResponse,
)
from pulse_chat.api.v1.schemas.user import UserResponse
from pulse_chat.application.dto.message import AttachmentUpload
from pulse_chat.services import message_service, unseen_service

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("/users", response_model=SidebarResponse)
async def list_sidebar_users(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> SidebarResponse:
    entries, total = await unseen_service.list_sidebar(principal, uow)
    users = [
        SidebarUserResponse(
            **UserResponse.model_validate(entry.user).model_dump(),
            unseen_count=entry.unseen_count,
            last_message=(
                MessageResponse.model_validate(entry.last_message)
                if entry.last_message is not None
                else None
            ),
        )
        for entry in entries
    ]
    return SidebarResponse(users=users, total=total)


@router.get("/{counterpart_id}", response_model=ConversationResponse)
async def get_conversation(
    counterpart_id: int,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ConversationResponse:
    messages = await message_service.list_conversation(principal, counterpart_id, uow)
    return ConversationResponse(
        messages=[MessageResponse.model_validate(m) for m in messages],
    )


@router.post(
    "/{counterpart_id}",
    response_model=SendMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    counterpart_id: int,
    principal: CurrentPrincipal,
    uow: UoWDep,
    attachments: AttachmentsDep,
    notifier: NotifierDep,
    text: Annotated[str | None, Form()] = None,
    image: Annotated[UploadFile | None, File()] = None,
) -> SendMessageResponse:
    upload = None
    if image is not None and image.filename:
        upload = AttachmentUpload(
            filename=image.filename,
            content_type=image.content_type or "application/octet-stream",
            data=await image.read(),
        )
    msg = await message_service.send_message(
        principal, counterpart_id, text, upload, uow, attachments, notifier,
    )
    return SendMessageResponse(message=MessageResponse.model_validate(msg))


@router.put("/mark/{message_id}", response_model=MarkSeenResponse)
async def mark_message_seen(
    message_id: int,
    principal: CurrentPrincipal,
    uow: UoWDep,
    notifier: NotifierDep,
) -> MarkSeenResponse:
    seen_at = await message_service.mark_seen(principal, message_id, uow, notifier)
    return MarkSeenResponse(message="Message marked as seen", seen_at=seen_at)


@router.delete("/{message_id}", response_model=Envelope)
async def delete_message(
    message_id: int,
    principal: CurrentPrincipal,
    uow: UoWDep,
    attachments: AttachmentsDep,
    notifier: NotifierDep,
) -> Envelope:
    await message_service.delete_message(principal, message_id, uow, attachments, notifier)
    return Envelope(message="Message deleted successfully")
