from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.models import User, UserRole, ADMIN_ROLES, PermissionLevel
from dataroom.schemas.admin import AdminUserResponse
from dataroom.schemas.permission import PermissionLevelResponse


async def count_admins(db: AsyncSession) -> int:
    return await db.scalar(select(func.count(User.id)).where(User.role.in_(ADMIN_ROLES))) or 0


async def to_admin_user_response(db: AsyncSession, user: User) -> AdminUserResponse:
    """User row plus its resolved permission level"""
    level: Optional[PermissionLevel] = None
    if user.permission_level_id:
        level = await db.get(PermissionLevel, user.permission_level_id)

    response = AdminUserResponse.model_validate(user)
    if level is not None:
        response.permission_level = PermissionLevelResponse.model_validate(level)
    return response


def registration_role(is_first_admin: bool) -> UserRole:
    """
    The first admin account ever registered becomes super_admin; every later
    self-registration is a plain admin whatever role it asked for.
    """
    return UserRole.SUPER_ADMIN if is_first_admin else UserRole.ADMIN
