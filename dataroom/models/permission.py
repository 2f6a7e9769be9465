from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text
from datetime import datetime

from dataroom.core.database import Base
from dataroom.models.base import generate_uuid


class PermissionLevel(Base):
    """Named bundle of document capabilities assigned to investors"""
    __tablename__ = "permission_levels"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=False)

    can_view = Column(Boolean, default=True, nullable=False)
    can_download = Column(Boolean, default=False, nullable=False)
    has_expiry = Column(Boolean, default=False, nullable=False)
    max_downloads = Column(Integer, nullable=True)  # None means unlimited

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
