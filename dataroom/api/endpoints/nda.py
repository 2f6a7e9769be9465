from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.core.config import settings
from dataroom.core.database import get_db
from dataroom.core.exceptions import ConflictError
from dataroom.core.logging_config import logger
from dataroom.models import User, NDAAcceptance
from dataroom.modules.auth.dependencies import get_current_user, get_nda_acceptance
from dataroom.schemas.nda import (
    NDAContentResponse,
    NDAAcceptRequest,
    NDAAcceptResponse,
    NDAStatusResponse,
)

router = APIRouter()


@router.get("/content", response_model=NDAContentResponse)
async def get_nda_content():
    """Current NDA text. No authentication required."""
    return NDAContentResponse(
        version=settings.NDA_VERSION,
        content=settings.NDA_CONTENT,
        effective_date=settings.NDA_EFFECTIVE_DATE,
    )


@router.post("/accept", response_model=NDAAcceptResponse, status_code=status.HTTP_201_CREATED)
async def accept_nda(
    data: NDAAcceptRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Record acceptance of the current NDA version. Once per user per version."""
    if await get_nda_acceptance(db, current_user.id) is not None:
        raise ConflictError("NDA already accepted")

    acceptance = NDAAcceptance(
        user_id=current_user.id,
        nda_version=settings.NDA_VERSION,
        digital_signature=data.digital_signature,
        ip_address=data.ip_address or "unknown",
        user_agent=data.user_agent,
    )
    db.add(acceptance)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("NDA already accepted")
    await db.refresh(acceptance)

    logger.log_auth_event(
        "nda_accept", success=True, user_email=current_user.email,
        nda_version=acceptance.nda_version, ip_address=acceptance.ip_address
    )
    return NDAAcceptResponse(
        nda_id=acceptance.id,
        version=acceptance.nda_version,
        accepted_at=acceptance.accepted_at,
    )


@router.get("/status", response_model=NDAStatusResponse)
async def get_nda_status(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    acceptance = await get_nda_acceptance(db, current_user.id)
    if acceptance is None:
        return NDAStatusResponse(accepted=False)
    return NDAStatusResponse(
        accepted=True,
        accepted_at=acceptance.accepted_at,
        version=acceptance.nda_version,
        nda_id=acceptance.id,
    )
