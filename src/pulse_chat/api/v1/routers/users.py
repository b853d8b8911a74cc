from __future__ import annotations

from fastapi import APIRouter, status

from pulse_chat.api.deps import CurrentPrincipal, HasherDep, IssuerDep, UoWDep
from pulse_chat.api.v1.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    SignupRequest,
    UpdateProfileRequest,
    UserResponse,
)
from pulse_chat.services import user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    body: SignupRequest,
    uow: UoWDep,
    hasher: HasherDep,
    issuer: IssuerDep,
) -> AuthResponse:
    token, user = await user_service.signup(
        body.full_name, body.email, body.password, body.bio, uow, hasher, issuer,
    )
    return AuthResponse(
        message="Account created successfully",
        token=token,
        user_data=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    uow: UoWDep,
    hasher: HasherDep,
    issuer: IssuerDep,
) -> AuthResponse:
    token, user = await user_service.login(body.email, body.password, uow, hasher, issuer)
    return AuthResponse(
        message="Login successful",
        token=token,
        user_data=UserResponse.model_validate(user),
    )


@router.get("/check-auth", response_model=ProfileResponse)
async def check_auth(principal: CurrentPrincipal, uow: UoWDep) -> ProfileResponse:
    user = await user_service.get_profile(principal, uow)
    return ProfileResponse(user_data=UserResponse.model_validate(user))


@router.put("/update-profile", response_model=ProfileResponse)
async def update_profile(
    body: UpdateProfileRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ProfileResponse:
    user = await user_service.update_profile(
        principal, body.full_name, body.bio, body.profile_pic, uow,
    )
    return ProfileResponse(
        message="Profile updated successfully",
        user_data=UserResponse.model_validate(user),
    )
