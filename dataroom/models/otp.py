from sqlalchemy import Column, String, Boolean, DateTime, Integer
from datetime import datetime
import enum

from dataroom.core.database import Base
from dataroom.models.base import generate_uuid


class OTPPurpose(str, enum.Enum):
    LOGIN = "login"
    ACCESS_REQUEST = "access_request"


class OTPCode(Base):
    """Hashed one-time code issued to an email address"""
    __tablename__ = "otp_codes"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), index=True, nullable=False)
    purpose = Column(String(50), default=OTPPurpose.LOGIN.value, nullable=False)
    code_hash = Column(String(128), nullable=False)
    attempts_remaining = Column(Integer, nullable=False)
    is_used = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    def is_expired(self, now: datetime = None) -> bool:
        return (now or datetime.utcnow()) >= self.expires_at

    def is_usable(self, now: datetime = None) -> bool:
        return not self.is_used and self.attempts_remaining > 0 and not self.is_expired(now)
