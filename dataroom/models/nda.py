from sqlalchemy import Column, String, DateTime, Text, ForeignKey, UniqueConstraint
from datetime import datetime

from dataroom.core.database import Base
from dataroom.models.base import generate_uuid


class NDAAcceptance(Base):
    """Immutable record of a user accepting one NDA version"""
    __tablename__ = "nda_acceptances"
    __table_args__ = (
        UniqueConstraint("user_id", "nda_version", name="uq_nda_user_version"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    nda_version = Column(String(20), nullable=False)

    # Signature details
    digital_signature = Column(String(255), nullable=False)
    ip_address = Column(String(45), nullable=False)
    user_agent = Column(Text, nullable=False)

    accepted_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<NDAAcceptance v{self.nda_version} by {self.user_id}>"
