from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from typing import List

from dataroom.core.database import get_db
from dataroom.core.exceptions import PermissionLevelNotFoundError, UserNotFoundError, ConflictError
from dataroom.models import User, PermissionLevel
from dataroom.modules.admin.audit import log_admin_action
from dataroom.modules.auth.dependencies import get_current_account, get_current_admin
from dataroom.modules.documents.permissions import resolve_capabilities
from dataroom.schemas.admin import MessageResponse
from dataroom.schemas.permission import (
    PermissionLevelCreate,
    PermissionLevelUpdate,
    PermissionLevelResponse,
    UserPermissionsResponse,
)

router = APIRouter()


async def _get_level(db: AsyncSession, level_id: str) -> PermissionLevel:
    level = await db.get(PermissionLevel, level_id)
    if level is None:
        raise PermissionLevelNotFoundError(level_id)
    return level


async def _ensure_unique_name(db: AsyncSession, name: str, exclude_id: str = None) -> None:
    query = select(PermissionLevel).where(PermissionLevel.name == name)
    if exclude_id:
        query = query.where(PermissionLevel.id != exclude_id)
    if await db.scalar(query) is not None:
        raise ConflictError(f"Permission level '{name}' already exists")


@router.get("/levels", response_model=List[PermissionLevelResponse])
async def list_levels(
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    result = await db.execute(select(PermissionLevel).order_by(PermissionLevel.name))
    return result.scalars().all()


@router.get("/levels/{level_id}", response_model=PermissionLevelResponse)
async def get_level(
    level_id: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    return await _get_level(db, level_id)


@router.post("/levels", response_model=PermissionLevelResponse, status_code=status.HTTP_201_CREATED)
async def create_level(
    request: Request,
    data: PermissionLevelCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    await _ensure_unique_name(db, data.name)

    level = PermissionLevel(**data.model_dump())
    db.add(level)
    await db.commit()
    await db.refresh(level)

    await log_admin_action(
        db, current_admin.id, "permission_level_created", "permission_level", level.id,
        details={"name": level.name}, request=request
    )
    return level


@router.put("/levels/{level_id}", response_model=PermissionLevelResponse)
async def update_level(
    request: Request,
    level_id: str,
    data: PermissionLevelUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    level = await _get_level(db, level_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("name"):
        await _ensure_unique_name(db, changes["name"], exclude_id=level.id)

    for field, value in changes.items():
        if value is None and field != "max_downloads":
            continue
        setattr(level, field, value)

    await db.commit()
    await db.refresh(level)

    await log_admin_action(
        db, current_admin.id, "permission_level_updated", "permission_level", level.id,
        details=changes, request=request
    )
    return level


@router.delete("/levels/{level_id}", response_model=MessageResponse)
async def delete_level(
    request: Request,
    level_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Delete a level; users holding it fall back to no level"""
    level = await _get_level(db, level_id)
    name = level.name

    await db.execute(
        update(User).where(User.permission_level_id == level_id).values(permission_level_id=None)
    )
    await db.delete(level)
    await db.commit()

    await log_admin_action(
        db, current_admin.id, "permission_level_deleted", "permission_level", level_id,
        details={"name": name}, request=request
    )
    return MessageResponse(message="Permission level deleted successfully")


@router.get("/user/{user_id}/permissions", response_model=UserPermissionsResponse)
async def get_user_permissions(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    """Effective permissions of a user. Investors may only read their own."""
    if not account.is_admin and account.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized"
        )

    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    caps = await resolve_capabilities(db, user)
    return UserPermissionsResponse(
        user_id=user.id,
        email=user.email,
        role=user.role.value,
        permission_level=PermissionLevelResponse.model_validate(caps.level) if caps.level else None,
        can_view=caps.can_view,
        can_download=caps.can_download,
        max_downloads=caps.max_downloads,
        downloads_used=caps.downloads_used,
    )
