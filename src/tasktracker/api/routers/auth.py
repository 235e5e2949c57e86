"""Routes handling sign-up, sign-in and sign-out."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...deps import AuthContext, AuthServiceDependency
from ...schemas import MessageResponse, SigninRequest, SignupRequest, TokenResponse, UserPublic

router = APIRouter(tags=["auth"])


@router.post(
    "/signup",
    response_model=UserPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def signup(payload: SignupRequest, service: AuthServiceDependency) -> UserPublic:
    user = await service.register_user(username=payload.username, password=payload.password)
    return UserPublic.from_model(user)


@router.post(
    "/signin",
    response_model=TokenResponse,
    summary="Exchange a username and password for a bearer token",
)
async def signin(
    payload: SigninRequest,
    service: AuthServiceDependency,
) -> TokenResponse:
    user = await service.authenticate_user(username=payload.username, password=payload.password)
    issued = service.issue_token(user)
    expires_in = AuthContext(user_id=user.id, expires_at=issued.expires_at).seconds_remaining()
    return TokenResponse(token=issued.token, expires_in=expires_in)


@router.post("/signout", response_model=MessageResponse, summary="Sign out")
async def signout() -> MessageResponse:
    """Tokens are stateless and stay valid until they expire."""
    return MessageResponse(message="signed out")
