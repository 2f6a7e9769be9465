from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from dataroom.models.access_request import AccessRequestStatus


class AccessRequestCreate(BaseModel):
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    message: Optional[str] = None


class AccessRequestResponse(BaseModel):
    id: str
    email: str
    full_name: str
    company: str
    phone: Optional[str] = None
    message: Optional[str] = None
    status: AccessRequestStatus
    admin_notes: Optional[str] = None
    expires_at: Optional[datetime] = None
    requested_at: datetime
    reviewed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AccessRequestSubmitted(BaseModel):
    id: str
    message: str = "Access request submitted. You will be notified once it is reviewed."


class AccessRequestCheck(BaseModel):
    exists: bool
    status: Optional[AccessRequestStatus] = None
