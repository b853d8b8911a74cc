"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import DBAPIError

from pulse_chat.application.dto.principal import Principal
from pulse_chat.application.exceptions import TransientIOError
from pulse_chat.application.ports.attachments import AttachmentStore
from pulse_chat.application.ports.auth import PasswordHasher, TokenIssuer, TokenVerifier
from pulse_chat.application.ports.realtime import MessageNotifier
from pulse_chat.config import settings
from pulse_chat.infrastructure.auth.bcrypt_hasher import BcryptHasher
from pulse_chat.infrastructure.auth.hs256_issuer import HS256Issuer
from pulse_chat.infrastructure.auth.hs256_verifier import HS256Verifier
from pulse_chat.infrastructure.db.session import AsyncSessionLocal
from pulse_chat.infrastructure.db.uow import SqlAlchemyUoW
from pulse_chat.infrastructure.storage.local_store import LocalAttachmentStore

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session, SqlAlchemyUoW(session) as uow:
        try:
            yield uow
        except DBAPIError as exc:
            raise TransientIOError("Datastore unavailable") from exc


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]

_verifier: TokenVerifier | None = None
_issuer: TokenIssuer | None = None
_hasher: PasswordHasher | None = None
_attachments: AttachmentStore | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)
    return _verifier


def get_issuer() -> TokenIssuer:
    global _issuer  # noqa: PLW0603
    if _issuer is None:
        _issuer = HS256Issuer(
            settings.JWT_SECRET, settings.JWT_ALGORITHM, settings.JWT_EXPIRES_MINUTES,
        )
    return _issuer


def get_hasher() -> PasswordHasher:
    global _hasher  # noqa: PLW0603
    if _hasher is None:
        _hasher = BcryptHasher()
    return _hasher


def get_attachments() -> AttachmentStore:
    global _attachments  # noqa: PLW0603
    if _attachments is None:
        _attachments = LocalAttachmentStore(settings.MEDIA_ROOT, settings.MEDIA_URL)
    return _attachments


def get_notifier(request: Request) -> MessageNotifier:
    return request.app.state.dispatcher


IssuerDep = Annotated[TokenIssuer, Depends(get_issuer)]
HasherDep = Annotated[PasswordHasher, Depends(get_hasher)]
AttachmentsDep = Annotated[AttachmentStore, Depends(get_attachments)]
NotifierDep = Annotated[MessageNotifier, Depends(get_notifier)]


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
) -> Principal:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, token missing",
        )
    verifier = get_verifier()
    try:
        return await verifier.verify(credentials.credentials)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
