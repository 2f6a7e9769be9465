from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from dataroom.core.database import get_db
from dataroom.core.exceptions import AccessRequestNotFoundError
from dataroom.core.logging_config import logger
from dataroom.models import AccessRequest, AccessRequestStatus
from dataroom.schemas.access_request import (
    AccessRequestCreate,
    AccessRequestResponse,
    AccessRequestSubmitted,
    AccessRequestCheck,
)

router = APIRouter()


@router.post("/", response_model=AccessRequestSubmitted, status_code=status.HTTP_201_CREATED)
async def submit_access_request(
    data: AccessRequestCreate,
    db: AsyncSession = Depends(get_db)
):
    """Public form. A pending request for the same email is updated in place."""
    email = data.email.lower()

    existing = await db.scalar(
        select(AccessRequest).where(
            AccessRequest.email == email,
            AccessRequest.status == AccessRequestStatus.PENDING,
        )
    )
    if existing is not None:
        existing.full_name = data.full_name.strip()
        existing.company = data.company.strip()
        existing.phone = data.phone
        existing.message = data.message
        access_request = existing
    else:
        access_request = AccessRequest(
            email=email,
            full_name=data.full_name.strip(),
            company=data.company.strip(),
            phone=data.phone,
            message=data.message,
        )
        db.add(access_request)

    await db.commit()
    await db.refresh(access_request)

    logger.info(
        f"Access request from {email} ({access_request.company})",
        extra={"event_type": "access_request", "access_request_id": access_request.id}
    )
    return AccessRequestSubmitted(id=access_request.id)


@router.get("/check/{email}", response_model=AccessRequestCheck)
async def check_access_request(email: str, db: AsyncSession = Depends(get_db)):
    """Status of the most recent request for email"""
    latest = await db.scalar(
        select(AccessRequest)
        .where(AccessRequest.email == email.strip().lower())
        .order_by(AccessRequest.requested_at.desc())
        .limit(1)
    )
    if latest is None:
        return AccessRequestCheck(exists=False)
    return AccessRequestCheck(exists=True, status=latest.status)


@router.get("/{request_id}", response_model=AccessRequestResponse)
async def get_access_request(request_id: str, db: AsyncSession = Depends(get_db)):
    access_request = await db.get(AccessRequest, request_id)
    if access_request is None:
        raise AccessRequestNotFoundError(request_id)
    return access_request
