"""
One-time code endpoints (no authentication).

POST /send-otp    — issue a 6-digit code for an email address
POST /verify-otp  — check a code; {"verified": true|false}
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_otp_service
from schemas.dto.requests.auth import SendOtpRequest, VerifyOtpRequest
from schemas.dto.responses.auth import OtpSentResponse, VerifyOtpResponse
from services.otp_service import OtpService

router = APIRouter(tags=["otp"])


@router.post("/send-otp", response_model=OtpSentResponse)
async def send_otp(
    body: SendOtpRequest,
    otp_service: OtpService = Depends(get_otp_service),
) -> OtpSentResponse:
    await otp_service.send_code(body.email)
    return OtpSentResponse(
        success=True,
        message="verification code sent",
        expires_in=otp_service.ttl_seconds,
    )


@router.post("/verify-otp", response_model=VerifyOtpResponse)
async def verify_otp(
    body: VerifyOtpRequest,
    otp_service: OtpService = Depends(get_otp_service),
) -> VerifyOtpResponse:
    return VerifyOtpResponse(verified=await otp_service.verify_code(body.email, body.code))
