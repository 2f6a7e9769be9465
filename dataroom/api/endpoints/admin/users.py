"""
Admin User Management endpoints.

Any admin may list and read users; creating, editing, deactivating and
activating other users requires super_admin.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from typing import Optional, List

from dataroom.core.database import get_db
from dataroom.core.exceptions import UserNotFoundError, PermissionLevelNotFoundError, ConflictError
from dataroom.core.security import get_password_hash
from dataroom.models import User, UserRole, PermissionLevel
from dataroom.modules.admin.audit import log_admin_action
from dataroom.modules.admin.users import to_admin_user_response
from dataroom.modules.auth.accounts import get_user_by_email
from dataroom.modules.auth.dependencies import get_current_admin, get_current_super_admin
from dataroom.schemas.admin import (
    AdminUserResponse,
    AdminUserCreate,
    AdminUserUpdate,
    MessageResponse,
)

router = APIRouter()


async def _get_user(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def _check_permission_level(db: AsyncSession, level_id: Optional[str]) -> None:
    if level_id and await db.get(PermissionLevel, level_id) is None:
        raise PermissionLevelNotFoundError(level_id)


@router.get("", response_model=List[AdminUserResponse])
async def list_users(
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """List users, newest first"""
    query = select(User)
    if search:
        search_term = f"%{search}%"
        query = query.where(or_(User.email.ilike(search_term), User.full_name.ilike(search_term)))
    if role is not None:
        query = query.where(User.role == role)
    if is_active is not None:
        query = query.where(User.is_active == is_active)

    result = await db.execute(query.order_by(User.created_at.desc()))
    return [await to_admin_user_response(db, user) for user in result.scalars().all()]


@router.post("", response_model=AdminUserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Request,
    data: AdminUserCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_super_admin)
):
    email = data.email.lower()
    if await get_user_by_email(db, email) is not None:
        raise ConflictError("Email already registered")
    await _check_permission_level(db, data.permission_level_id)

    user = User(
        email=email,
        full_name=data.full_name.strip(),
        hashed_password=get_password_hash(data.password),
        role=data.role,
        permission_level_id=data.permission_level_id,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    await log_admin_action(
        db, current_admin.id, "user_created", "user", user.id,
        details={"email": email, "role": data.role.value}, request=request
    )
    return await to_admin_user_response(db, user)


@router.get("/{user_id}", response_model=AdminUserResponse)
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await to_admin_user_response(db, await _get_user(db, user_id))


@router.put("/{user_id}", response_model=AdminUserResponse)
async def update_user(
    request: Request,
    user_id: str,
    data: AdminUserUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_super_admin)
):
    user = await _get_user(db, user_id)
    changes = data.model_dump(exclude_unset=True)

    if user.id == current_admin.id:
        # Prevent self-demotion or self-deactivation
        if changes.get("role") not in (None, UserRole.SUPER_ADMIN) or changes.get("is_active") is False:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot demote or deactivate your own account"
            )

    if "permission_level_id" in changes:
        await _check_permission_level(db, changes["permission_level_id"])

    for field, value in changes.items():
        if field == "full_name" and value is not None:
            value = value.strip()
        if field in ("role", "is_active", "full_name") and value is None:
            continue
        setattr(user, field, value)

    await db.commit()
    await db.refresh(user)

    await log_admin_action(
        db, current_admin.id, "user_updated", "user", user.id,
        details={k: (v.value if isinstance(v, UserRole) else v) for k, v in changes.items()},
        request=request
    )
    return await to_admin_user_response(db, user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def deactivate_user(
    request: Request,
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_super_admin)
):
    """Deactivate (users are never hard-deleted)"""
    user = await _get_user(db, user_id)
    if user.id == current_admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot deactivate your own account"
        )

    user.is_active = False
    await db.commit()

    await log_admin_action(db, current_admin.id, "user_deactivated", "user", user.id, request=request)
    return MessageResponse(message="User deactivated successfully")


@router.post("/{user_id}/activate", response_model=MessageResponse)
async def activate_user(
    request: Request,
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_super_admin)
):
    user = await _get_user(db, user_id)
    user.is_active = True
    await db.commit()

    await log_admin_action(db, current_admin.id, "user_activated", "user", user.id, request=request)
    return MessageResponse(message="User activated successfully")
