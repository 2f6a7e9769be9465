"""
Admin console schemas: registration, login, user management, access request
review and the audit trail.
"""
from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional, Any, Dict
from datetime import datetime

from dataroom.models.user import UserRole
from dataroom.models.access_request import AccessRequestStatus
from dataroom.schemas.permission import PermissionLevelResponse


# ============================================
# Admin auth
# ============================================

class AdminRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = UserRole.ADMIN


class AdminLogin(BaseModel):
    """Accepts `email`, or `username` carrying the email"""
    email: EmailStr
    password: str

    @model_validator(mode='before')
    @classmethod
    def username_as_email(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("email") and data.get("username"):
            data = {**data, "email": data["username"]}
        return data


class AdminProfileUpdate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8)


class AdminUserResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    company: Optional[str] = None
    role: UserRole
    is_active: bool
    is_super_admin: bool = False
    permission_level_id: Optional[str] = None
    permission_level: Optional[PermissionLevelResponse] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminLoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: AdminUserResponse


# ============================================
# User management
# ============================================

class AdminUserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = UserRole.USER
    permission_level_id: Optional[str] = None


class AdminUserUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    permission_level_id: Optional[str] = None


# ============================================
# Access request review
# ============================================

class AccessRequestReview(BaseModel):
    status: AccessRequestStatus
    admin_notes: Optional[str] = None
    expires_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    message: str


# ============================================
# Audit trail
# ============================================

class AuditLogResponse(BaseModel):
    id: str
    admin_id: str
    admin_email: Optional[str] = None
    action: str
    target_type: str
    target_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    created_at: datetime
