from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from dataroom.models.otp import OTPPurpose
from dataroom.models.user import UserRole


class OTPRequest(BaseModel):
    email: EmailStr
    purpose: OTPPurpose = OTPPurpose.LOGIN


class OTPRequestResponse(BaseModel):
    """Returned whether or not the email is known"""
    success: bool = True
    message: str = "Login code sent to your email."
    expires_in_minutes: int
    purpose: str


class OTPVerify(BaseModel):
    email: EmailStr
    otp_code: str = Field(..., min_length=4, max_length=10)
    purpose: OTPPurpose = OTPPurpose.LOGIN

    @field_validator('otp_code')
    @classmethod
    def digits_only(cls, v: str) -> str:
        v = v.strip()
        if not v.isdigit():
            raise ValueError("Code must contain digits only")
        return v


class UserResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    company: Optional[str] = None
    role: UserRole
    is_active: bool
    permission_level_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class OTPVerifyResponse(BaseModel):
    """Login verification carries a token; access-request verification does not"""
    success: bool = True
    message: str
    access_token: Optional[str] = None
    token_type: str = "bearer"
    user: Optional[UserResponse] = None


class DemoLoginRequest(BaseModel):
    email: EmailStr
    full_name: Optional[str] = None
