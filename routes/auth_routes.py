"""
Authentication endpoints.

POST /register          — create account, returns token + user (201)
POST /login             — returns token + user
POST /check-email       — whether an account exists for an email
POST /change-password   — requires bearer token
POST /logout            — requires bearer token; revokes the session
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from dependencies import get_auth_service, get_current_user
from schemas.dto.requests.auth import (
    ChangePasswordRequest,
    CheckEmailRequest,
    LoginRequest,
    RegisterRequest,
)
from schemas.dto.responses.auth import (
    AccountProfileResponse,
    AuthResponse,
    CheckEmailResponse,
)
from schemas.dto.responses.common import MessageResponse
from services.auth_service import AuthContext, AuthService

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    token, account = await auth_service.register(body.name, body.email, body.password)
    return AuthResponse(
        message="user registered successfully",
        token=token,
        user=AccountProfileResponse.from_account(account),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    token, account = await auth_service.login(body.email, body.password)
    return AuthResponse(
        message="logged in successfully",
        token=token,
        user=AccountProfileResponse.from_account(account),
    )


@router.post("/check-email", response_model=CheckEmailResponse)
async def check_email(
    body: CheckEmailRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> CheckEmailResponse:
    return CheckEmailResponse(exists=await auth_service.check_email(body.email))


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    ctx: AuthContext = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.change_password(
        ctx.user_id, body.current_password, body.new_password
    )
    return MessageResponse(success=True, message="password changed successfully")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    ctx: AuthContext = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.logout(ctx)
    return MessageResponse(success=True, message="logged out")
