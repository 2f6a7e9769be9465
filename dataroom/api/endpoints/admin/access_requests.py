"""
Admin review of access requests. Status changes are unconstrained; approving
a request provisions an active investor account for its email.
"""
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import datetime, timezone
from typing import Optional, List

from dataroom.core.database import get_db
from dataroom.core.exceptions import AccessRequestNotFoundError
from dataroom.models import User, UserRole, AccessRequest, AccessRequestStatus
from dataroom.modules.admin.audit import log_admin_action
from dataroom.modules.auth.accounts import get_user_by_email
from dataroom.modules.auth.dependencies import get_current_admin
from dataroom.schemas.access_request import AccessRequestResponse
from dataroom.schemas.admin import AccessRequestReview

router = APIRouter()


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored datetimes are naive UTC"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


async def provision_investor(db: AsyncSession, access_request: AccessRequest) -> User:
    """Create or reactivate the investor account behind an approved request"""
    user = await get_user_by_email(db, access_request.email)
    if user is None:
        user = User(
            email=access_request.email,
            full_name=access_request.full_name,
            company=access_request.company,
            role=UserRole.USER,
            is_active=True,
        )
        db.add(user)
    elif not user.is_active and user.role == UserRole.USER:
        user.is_active = True
    return user


@router.get("", response_model=List[AccessRequestResponse])
async def list_access_requests(
    request_status: Optional[AccessRequestStatus] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    query = select(AccessRequest)
    if request_status is not None:
        query = query.where(AccessRequest.status == request_status)
    result = await db.execute(query.order_by(AccessRequest.requested_at.desc()))
    return result.scalars().all()


@router.put("/{request_id}", response_model=AccessRequestResponse)
async def review_access_request(
    request: Request,
    request_id: str,
    data: AccessRequestReview,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    access_request = await db.get(AccessRequest, request_id)
    if access_request is None:
        raise AccessRequestNotFoundError(request_id)

    previous_status = access_request.status
    access_request.status = data.status
    access_request.admin_notes = data.admin_notes
    access_request.expires_at = to_naive_utc(data.expires_at)
    access_request.reviewed_by = current_admin.id
    access_request.reviewed_at = datetime.utcnow()

    if data.status == AccessRequestStatus.APPROVED:
        await provision_investor(db, access_request)

    await db.commit()
    await db.refresh(access_request)

    await log_admin_action(
        db, current_admin.id, "access_request_reviewed", "access_request", access_request.id,
        details={"from": previous_status.value, "to": data.status.value},
        request=request
    )
    return access_request
