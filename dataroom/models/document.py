from sqlalchemy import (
    Column, String, Boolean, DateTime, Integer, Text, LargeBinary, JSON, ForeignKey
)
from sqlalchemy.orm import deferred
from datetime import datetime
import enum

from dataroom.core.database import Base
from dataroom.models.base import generate_uuid


class DocumentCategory(Base):
    """Category tree node; documents reference categories by name"""
    __tablename__ = "document_categories"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(100), unique=True, nullable=False)
    slug = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    parent_category_id = Column(String(36), ForeignKey("document_categories.id"), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Document(Base):
    """Uploaded file held inline in the database"""
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    categories = Column(JSON, default=list, nullable=False)  # Category names, first is primary
    tags = Column(JSON, default=list, nullable=False)

    # File
    file_name = Column(String(255), nullable=False)
    file_type = Column(String(100), nullable=False)  # MIME type
    file_size = Column(Integer, nullable=False)
    content = deferred(Column(LargeBinary, nullable=False))

    # Ownership and counters
    uploaded_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    uploaded_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    view_count = Column(Integer, default=0, nullable=False)
    download_count = Column(Integer, default=0, nullable=False)

    @property
    def primary_category(self) -> str:
        return self.categories[0] if self.categories else "Uncategorized"


class DocumentAction(str, enum.Enum):
    VIEW = "view"
    DOWNLOAD = "download"


class DocumentAccessLog(Base):
    """One row per view or download"""
    __tablename__ = "document_access_logs"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    # Kept after the document is deleted: download limits count these rows
    document_id = Column(String(36), ForeignKey("documents.id", ondelete="SET NULL"), nullable=True, index=True)
    document_title = Column(String(255), nullable=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    user_email = Column(String(255), nullable=True)
    action = Column(String(20), nullable=False)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    accessed_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
