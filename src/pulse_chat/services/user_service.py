from __future__ import annotations

from datetime import datetime, timezone

from pulse_chat.application.dto.principal import Principal
from pulse_chat.application.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from pulse_chat.application.ports.auth import PasswordHasher, TokenIssuer
from pulse_chat.application.uow import UnitOfWork
from pulse_chat.domain.entities.user import User


async def signup(
    full_name: str,
    email: str,
    password: str,
    bio: str | None,
    uow: UnitOfWork,
    hasher: PasswordHasher,
    issuer: TokenIssuer,
) -> tuple[str, User]:
    if not full_name or not email or not password:
        raise ValidationError("Full name, email and password are required")

    if await uow.users.get_by_email(email) is not None:
        raise ConflictError("Email already in use")

    password_hash = await hasher.hash(password)
    user = await uow.users_w.create(full_name, email, password_hash, bio or "")
    await uow.commit()
    return issuer.issue(user.id), user


async def login(
    email: str,
    password: str,
    uow: UnitOfWork,
    hasher: PasswordHasher,
    issuer: TokenIssuer,
) -> tuple[str, User]:
    user = await uow.users.get_by_email(email)
    password_hash = await uow.users.get_password_hash(email)
    if user is None or password_hash is None:
        raise NotFoundError("User not found")

    if not await hasher.verify(password, password_hash):
        raise AuthenticationError("Invalid credentials")

    await uow.users_w.touch_last_seen(user.id, datetime.now(timezone.utc))
    await uow.commit()
    return issuer.issue(user.id), user


async def get_profile(principal: Principal, uow: UnitOfWork) -> User:
    user = await uow.users.get_by_id(principal.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def update_profile(
    principal: Principal,
    full_name: str | None,
    bio: str | None,
    profile_pic: str | None,
    uow: UnitOfWork,
) -> User:
    """Apply the non-empty fields; empty values leave the stored ones untouched."""
    user = await uow.users_w.update_profile(
        principal.user_id,
        full_name=full_name,
        bio=bio,
        profile_pic=profile_pic,
    )
    if user is None:
        raise NotFoundError("User not found")
    await uow.commit()
    return user
