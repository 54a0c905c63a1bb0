"""
Profile endpoints (all require a bearer token).

GET      /profile                 — current account
PUT|POST /update-profile          — partial profile update
POST     /upload-profile-picture  — multipart image upload (field ``file``)
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from dependencies import get_current_user, get_profile_service
from schemas.dto.requests.profile import UpdateProfileRequest
from schemas.dto.responses.auth import (
    AccountProfileResponse,
    ProfileResponse,
    UploadPictureResponse,
)
from services.auth_service import AuthContext
from services.profile_service import ProfileService

router = APIRouter(tags=["profile"])


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    ctx: AuthContext = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    account = await profile_service.get_profile(ctx.user_id)
    return ProfileResponse(user=AccountProfileResponse.from_account(account))


@router.api_route(
    "/update-profile", methods=["PUT", "POST"], response_model=ProfileResponse
)
async def update_profile(
    body: UpdateProfileRequest,
    ctx: AuthContext = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    account = await profile_service.update_profile(
        ctx.user_id,
        name=body.name,
        phone=body.phone,
        birthday=body.birthday,
        gender=body.gender,
        address=body.address,
    )
    return ProfileResponse(
        message="profile updated successfully",
        user=AccountProfileResponse.from_account(account),
    )


@router.post("/upload-profile-picture", response_model=UploadPictureResponse)
async def upload_profile_picture(
    file: Optional[UploadFile] = File(default=None),
    ctx: AuthContext = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
) -> UploadPictureResponse:
    data = b""
    if file is not None:
        # One byte past the limit is enough for the service to reject it
        data = await file.read(profile_service.max_upload_bytes + 1)
    url, account = await profile_service.upload_picture(
        ctx.user_id,
        filename=file.filename if file is not None else None,
        content_type=file.content_type if file is not None else None,
        data=data,
    )
    return UploadPictureResponse(
        message="profile picture uploaded successfully",
        url=url,
        user=AccountProfileResponse.from_account(account),
    )
