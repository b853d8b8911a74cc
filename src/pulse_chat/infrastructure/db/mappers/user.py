from __future__ import annotations

from pulse_chat.domain.entities.user import User
from pulse_chat.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        full_name=model.full_name,
        email=model.email,
        bio=model.bio,
        profile_pic=model.profile_pic,
        last_seen=model.last_seen,
        created_at=model.created_at,
    )
