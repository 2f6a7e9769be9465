"""
Admin account endpoints: self-registration, password login, profile, password change.
"""
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.core.database import get_db
from dataroom.core.exceptions import AuthenticationError, ConflictError
from dataroom.core.logging_config import logger
from dataroom.core.rate_limiter import login_rate_limit
from dataroom.core.security import (
    verify_password,
    get_password_hash,
    create_user_token,
    SCOPE_ADMIN,
)
from dataroom.models import User
from dataroom.modules.admin.audit import log_admin_action
from dataroom.modules.admin.users import count_admins, to_admin_user_response, registration_role
from dataroom.modules.auth.accounts import get_user_by_email, touch_last_login
from dataroom.modules.auth.dependencies import get_current_admin
from dataroom.schemas.admin import (
    AdminRegister,
    AdminLogin,
    AdminLoginResponse,
    AdminProfileUpdate,
    AdminUserResponse,
    ChangePasswordRequest,
    MessageResponse,
)

router = APIRouter()


@router.post("/register", response_model=AdminUserResponse, status_code=status.HTTP_201_CREATED)
@login_rate_limit()
async def register_admin(
    request: Request,
    data: AdminRegister,
    db: AsyncSession = Depends(get_db)
):
    """Register an admin account; the first one becomes super_admin"""
    client_ip = request.client.host if request.client else "unknown"
    email = data.email.lower()

    if await get_user_by_email(db, email) is not None:
        logger.log_auth_event(
            "admin_register", success=False, user_email=email,
            reason="Email already registered", client_ip=client_ip
        )
        raise ConflictError("Email already registered")

    role = registration_role(await count_admins(db) == 0)
    admin = User(
        email=email,
        full_name=data.full_name.strip(),
        hashed_password=get_password_hash(data.password),
        role=role,
        is_active=True,
    )
    db.add(admin)
    await db.commit()
    await db.refresh(admin)

    logger.log_auth_event(
        "admin_register", success=True, user_email=email,
        client_ip=client_ip, user_role=role.value
    )
    return await to_admin_user_response(db, admin)


@router.post("/login", response_model=AdminLoginResponse)
@login_rate_limit()
async def login_admin(
    request: Request,
    data: AdminLogin,
    db: AsyncSession = Depends(get_db)
):
    client_ip = request.client.host if request.client else "unknown"
    admin = await get_user_by_email(db, data.email)

    if (
        admin is None
        or not admin.is_admin
        or not admin.hashed_password
        or not verify_password(data.password, admin.hashed_password)
    ):
        logger.log_auth_event(
            "admin_login", success=False, user_email=data.email,
            reason="Invalid credentials", client_ip=client_ip
        )
        raise AuthenticationError("Incorrect email or password")

    if not admin.is_active:
        logger.log_auth_event(
            "admin_login", success=False, user_email=admin.email,
            reason="Account inactive", client_ip=client_ip
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    await touch_last_login(db, admin)
    logger.log_auth_event("admin_login", success=True, user_email=admin.email, client_ip=client_ip)

    return AdminLoginResponse(
        access_token=create_user_token(admin.id, admin.email, SCOPE_ADMIN),
        user=await to_admin_user_response(db, admin),
    )


@router.get("/me", response_model=AdminUserResponse)
async def get_me(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await to_admin_user_response(db, current_admin)


@router.put("/me", response_model=AdminUserResponse)
async def update_me(
    request: Request,
    data: AdminProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Update own profile (full name)"""
    current_admin.full_name = data.full_name.strip()
    await db.commit()
    await db.refresh(current_admin)

    await log_admin_action(db, current_admin.id, "profile_updated", "user", current_admin.id, request=request)
    return await to_admin_user_response(db, current_admin)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    request: Request,
    data: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    if not current_admin.hashed_password or not verify_password(
        data.current_password, current_admin.hashed_password
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )

    current_admin.hashed_password = get_password_hash(data.new_password)
    await db.commit()

    await log_admin_action(db, current_admin.id, "password_changed", "user", current_admin.id, request=request)
    logger.log_auth_event("password_change", success=True, user_email=current_admin.email)
    return MessageResponse(message="Password changed successfully")
