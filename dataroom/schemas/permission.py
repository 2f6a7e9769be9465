from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


def strip_required_text(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


class PermissionLevelCreate(BaseModel):
    name: str = Field(..., max_length=100)
    description: str
    can_view: bool = True
    can_download: bool = False
    has_expiry: bool = False
    max_downloads: Optional[int] = Field(None, ge=0)

    @field_validator('name', 'description')
    @classmethod
    def not_blank(cls, v: str) -> str:
        return strip_required_text(v)


class PermissionLevelUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    can_view: Optional[bool] = None
    can_download: Optional[bool] = None
    has_expiry: Optional[bool] = None
    max_downloads: Optional[int] = Field(None, ge=0)

    @field_validator('name', 'description')
    @classmethod
    def not_blank(cls, v: Optional[str]) -> Optional[str]:
        return strip_required_text(v)


class PermissionLevelResponse(BaseModel):
    id: str
    name: str
    description: str
    can_view: bool
    can_download: bool
    has_expiry: bool
    max_downloads: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class UserPermissionsResponse(BaseModel):
    """Effective capabilities of one user"""
    user_id: str
    email: str
    role: str
    permission_level: Optional[PermissionLevelResponse] = None
    can_view: bool
    can_download: bool
    max_downloads: Optional[int] = None
    downloads_used: int = 0
