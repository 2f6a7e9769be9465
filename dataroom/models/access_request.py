from sqlalchemy import Column, String, DateTime, Text, Enum as SQLEnum, ForeignKey
from datetime import datetime
import enum

from dataroom.core.database import Base
from dataroom.models.base import generate_uuid


class AccessRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class AccessRequest(Base):
    """Prospective investor asking to be let into the data room"""
    __tablename__ = "access_requests"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    company = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    message = Column(Text, nullable=True)

    # Review
    status = Column(SQLEnum(AccessRequestStatus), default=AccessRequestStatus.PENDING, nullable=False)
    admin_notes = Column(Text, nullable=True)
    reviewed_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    expires_at = Column(DateTime, nullable=True)

    # Timestamps
    requested_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    reviewed_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
