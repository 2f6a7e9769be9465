from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.core.config import settings
from dataroom.models import User, UserRole, AccessRequest, AccessRequestStatus


def default_name_for(email: str) -> str:
    return email.split("@")[0] or "Investor"


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    return await db.scalar(select(User).where(User.email == email.lower()))


async def get_or_provision_investor(db: AsyncSession, email: str) -> Optional[User]:
    """
    Find the investor account for email, creating it when the email has an
    approved access request or the server runs in demo mode.
    """
    email = email.lower()
    user = await get_user_by_email(db, email)
    if user is not None:
        return user

    approved = await db.scalar(
        select(AccessRequest)
        .where(AccessRequest.email == email, AccessRequest.status == AccessRequestStatus.APPROVED)
        .order_by(AccessRequest.requested_at.desc())
        .limit(1)
    )
    if approved is None and not settings.DEMO_MODE:
        return None

    user = User(
        email=email,
        full_name=approved.full_name if approved else default_name_for(email),
        company=approved.company if approved else None,
        role=UserRole.USER,
        is_active=True,
    )
    db.add(user)
    await db.flush()
    return user


async def touch_last_login(db: AsyncSession, user: User) -> None:
    user.last_login = datetime.utcnow()
    await db.commit()
    await db.refresh(user)
