from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional, Dict, Any

from dataroom.core.config import settings
from dataroom.core.database import get_db
from dataroom.core.exceptions import NDARequiredError
from dataroom.core.logging_config import set_user_id
from dataroom.core.security import decode_token, SCOPE_INVESTOR, SCOPE_ADMIN
from dataroom.models import User, NDAAcceptance

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Dict[str, Any]:
    """Decode the bearer token; 401 when missing or invalid"""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")

    payload = decode_token(credentials.credentials)
    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type")
    if not payload.get("sub"):
        raise _unauthorized("Invalid token payload")
    return payload


async def _load_user(db: AsyncSession, user_id: str) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise _unauthorized("User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    set_user_id(user.id)
    return user


async def get_current_account(
    payload: Dict[str, Any] = Depends(get_token_payload),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Any authenticated account, investor or admin session"""
    return await _load_user(db, payload["sub"])


async def get_current_user(
    payload: Dict[str, Any] = Depends(get_token_payload),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Investor session (token issued by OTP verification)"""
    if payload.get("scope") != SCOPE_INVESTOR:
        raise _unauthorized("Investor session required")
    return await _load_user(db, payload["sub"])


async def get_current_admin(
    payload: Dict[str, Any] = Depends(get_token_payload),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Admin session (token issued by admin password login)"""
    if payload.get("scope") != SCOPE_ADMIN:
        raise _unauthorized("Admin session required")

    user = await _load_user(db, payload["sub"])
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user


async def get_current_super_admin(
    current_admin: User = Depends(get_current_admin),
) -> User:
    if not current_admin.is_super_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Super admin access required"
        )
    return current_admin


async def get_nda_acceptance(db: AsyncSession, user_id: str) -> Optional[NDAAcceptance]:
    """Acceptance of the current NDA version, if any"""
    result = await db.execute(
        select(NDAAcceptance).where(
            NDAAcceptance.user_id == user_id,
            NDAAcceptance.nda_version == settings.NDA_VERSION,
        )
    )
    return result.scalar_one_or_none()


async def require_nda_accepted(
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Investors must have accepted the current NDA; admins pass through"""
    if account.is_admin:
        return account

    if await get_nda_acceptance(db, account.id) is None:
        raise NDARequiredError()
    return account
