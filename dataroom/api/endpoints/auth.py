from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.core.config import settings
from dataroom.core.database import get_db
from dataroom.core.exceptions import AuthenticationError
from dataroom.core.logging_config import logger
from dataroom.core.rate_limiter import otp_rate_limit
from dataroom.core.security import create_user_token, SCOPE_INVESTOR
from dataroom.models import User, OTPPurpose
from dataroom.modules.auth import otp_service
from dataroom.modules.auth.accounts import get_or_provision_investor, touch_last_login
from dataroom.modules.auth.dependencies import get_current_user
from dataroom.schemas.auth import (
    OTPRequest,
    OTPRequestResponse,
    OTPVerify,
    OTPVerifyResponse,
    UserResponse,
)

router = APIRouter()


def _sent_response(purpose: OTPPurpose) -> OTPRequestResponse:
    message = (
        "Login code sent to your email."
        if purpose == OTPPurpose.LOGIN
        else "Verification code sent to your email."
    )
    return OTPRequestResponse(
        message=message,
        expires_in_minutes=settings.OTP_EXPIRE_MINUTES,
        purpose=purpose.value,
    )


@router.post("/request-otp", response_model=OTPRequestResponse)
@otp_rate_limit()
async def request_otp(
    request: Request,
    data: OTPRequest,
    db: AsyncSession = Depends(get_db)
):
    """Send a one-time code. The response never reveals whether the email is known."""
    await otp_service.issue_code(db, data.email, data.purpose)
    return _sent_response(data.purpose)


@router.post("/resend-otp", response_model=OTPRequestResponse)
@otp_rate_limit()
async def resend_otp(
    request: Request,
    data: OTPRequest,
    db: AsyncSession = Depends(get_db)
):
    """Issue a fresh code, invalidating the previous one"""
    await otp_service.issue_code(db, data.email, data.purpose)
    return _sent_response(data.purpose)


@router.post("/verify-otp", response_model=OTPVerifyResponse)
@otp_rate_limit()
async def verify_otp(
    request: Request,
    data: OTPVerify,
    db: AsyncSession = Depends(get_db)
):
    """Verify a code. Login codes yield an investor bearer token."""
    client_ip = request.client.host if request.client else "unknown"

    await otp_service.verify_code(db, data.email, data.otp_code, data.purpose)

    if data.purpose == OTPPurpose.ACCESS_REQUEST:
        return OTPVerifyResponse(message="Email verified")

    user = await get_or_provision_investor(db, data.email)
    if user is None:
        raise AuthenticationError("Invalid or expired code")

    if not user.is_active:
        logger.log_auth_event(
            "login", success=False, user_email=user.email,
            reason="Account inactive", client_ip=client_ip
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    await touch_last_login(db, user)
    logger.log_auth_event("login", success=True, user_email=user.email, client_ip=client_ip)

    return OTPVerifyResponse(
        message="Login successful",
        access_token=create_user_token(user.id, user.email, SCOPE_INVESTOR),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Current investor"""
    return current_user
