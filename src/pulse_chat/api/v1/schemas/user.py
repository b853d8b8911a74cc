from __future__ import annotations

from datetime import datetime

from pydantic import EmailStr

from pulse_chat.api.v1.schemas.common import CamelModel, Envelope


class SignupRequest(CamelModel):
    full_name: str
    email: EmailStr
    password: str
    bio: str | None = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class UpdateProfileRequest(CamelModel):
    full_name: str | None = None
    bio: str | None = None
    profile_pic: str | None = None


class UserResponse(CamelModel):
    id: int
    full_name: str
    email: str
    bio: str
    profile_pic: str
    last_seen: datetime


class AuthResponse(Envelope):
    token: str
    user_data: UserResponse


class ProfileResponse(Envelope):
    user_data: UserResponse
