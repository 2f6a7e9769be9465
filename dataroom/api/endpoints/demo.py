from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.core.config import settings
from dataroom.core.database import get_db
from dataroom.core.logging_config import logger
from dataroom.core.security import create_user_token, SCOPE_INVESTOR
from dataroom.modules.auth.accounts import get_or_provision_investor, touch_last_login
from dataroom.schemas.auth import DemoLoginRequest, TokenResponse, UserResponse

router = APIRouter()


@router.post("/auto-login", response_model=TokenResponse)
async def auto_login(
    request: Request,
    data: DemoLoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Skip the OTP step for an email. Only available in demo mode."""
    if not settings.DEMO_MODE:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    user = await get_or_provision_investor(db, data.email)
    if data.full_name and not user.full_name:
        user.full_name = data.full_name
    await touch_last_login(db, user)

    logger.log_auth_event(
        "demo_auto_login", success=True, user_email=user.email,
        client_ip=request.client.host if request.client else "unknown"
    )
    return TokenResponse(
        access_token=create_user_token(user.id, user.email, SCOPE_INVESTOR),
        user=UserResponse.model_validate(user),
    )
