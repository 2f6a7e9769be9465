from sqlalchemy import Column, String, Boolean, DateTime, Text, Enum as SQLEnum, ForeignKey
from datetime import datetime
import enum

from dataroom.core.database import Base
from dataroom.models.base import generate_uuid


class QAStatus(str, enum.Enum):
    PENDING = "pending"
    ANSWERED = "answered"


class QAThread(Base):
    """Investor question with an optional admin answer"""
    __tablename__ = "qa_threads"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    question_text = Column(Text, nullable=False)
    category = Column(String(100), default="General", nullable=False)
    is_urgent = Column(Boolean, default=False, nullable=False)
    is_public = Column(Boolean, default=False, nullable=False)

    asked_by = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    asked_by_email = Column(String(255), nullable=True)
    asked_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    answer_text = Column(Text, nullable=True)
    answered_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    answered_at = Column(DateTime, nullable=True)

    status = Column(SQLEnum(QAStatus), default=QAStatus.PENDING, nullable=False)
