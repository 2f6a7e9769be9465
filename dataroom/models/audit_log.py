from sqlalchemy import Column, String, DateTime, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime

from dataroom.core.database import Base
from dataroom.models.base import generate_uuid


class AuditLog(Base):
    """Audit log for tracking admin actions"""
    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    admin_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Action details
    action = Column(String(100), nullable=False)  # e.g. 'user_created', 'document_deleted'
    target_type = Column(String(50), nullable=False)  # e.g. 'user', 'document', 'permission_level'
    target_id = Column(String(36), nullable=True)
    details = Column(JSON, nullable=True)

    # Request metadata
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    admin = relationship("User", foreign_keys=[admin_id])

    def __repr__(self):
        return f"<AuditLog {self.action} by {self.admin_id}>"
