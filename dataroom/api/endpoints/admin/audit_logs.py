"""
Read-only view of the admin audit trail, newest first.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional, List

from dataroom.core.database import get_db
from dataroom.models import User, AuditLog
from dataroom.modules.auth.dependencies import get_current_admin
from dataroom.schemas.admin import AuditLogResponse

router = APIRouter()


@router.get("", response_model=List[AuditLogResponse])
async def list_audit_logs(
    action: Optional[str] = None,
    target_type: Optional[str] = None,
    admin_id: Optional[str] = None,
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    query = select(AuditLog, User.email).outerjoin(User, AuditLog.admin_id == User.id)
    if action:
        query = query.where(AuditLog.action == action)
    if target_type:
        query = query.where(AuditLog.target_type == target_type)
    if admin_id:
        query = query.where(AuditLog.admin_id == admin_id)

    result = await db.execute(query.order_by(AuditLog.created_at.desc()).limit(limit))
    return [
        AuditLogResponse(
            id=log.id,
            admin_id=log.admin_id,
            admin_email=email,
            action=log.action,
            target_type=log.target_type,
            target_id=log.target_id,
            details=log.details,
            ip_address=log.ip_address,
            created_at=log.created_at,
        )
        for log, email in result.all()
    ]
