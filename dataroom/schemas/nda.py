from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


class NDAContentResponse(BaseModel):
    version: str
    content: str
    effective_date: str


class NDAAcceptRequest(BaseModel):
    digital_signature: str = Field(..., max_length=255)
    ip_address: str = Field("unknown", max_length=45)
    user_agent: str = Field(..., max_length=2000)

    @field_validator('digital_signature')
    @classmethod
    def signature_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Full legal name is required")
        return v


class NDAAcceptResponse(BaseModel):
    message: str = "NDA accepted successfully"
    nda_id: str
    version: str
    accepted_at: datetime


class NDAStatusResponse(BaseModel):
    accepted: bool
    accepted_at: Optional[datetime] = None
    version: Optional[str] = None
    nda_id: Optional[str] = None
