from pydantic import BaseModel, computed_field
from typing import Optional, List
from datetime import datetime


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    parent_category_id: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True
    created_at: datetime

    class Config:
        from_attributes = True


class DocumentResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    file_name: str
    file_type: str
    file_size: int
    categories: List[str] = []
    tags: List[str] = []
    primary_category: str = "Uncategorized"
    uploaded_at: datetime
    uploaded_by: Optional[str] = None
    view_count: int = 0
    download_count: int = 0

    class Config:
        from_attributes = True

    @computed_field
    @property
    def file_path(self) -> str:
        return f"/api/documents/{self.id}/download"

    @computed_field
    @property
    def file_url(self) -> str:
        return f"/api/documents/{self.id}/view"


class DocumentUrlResponse(BaseModel):
    url: str
    download_url: str
    file_name: str
    file_type: str


class DocumentAccessLogResponse(BaseModel):
    id: str
    document_id: Optional[str] = None
    document_title: Optional[str] = None
    user_id: str
    user_email: Optional[str] = None
    action: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    accessed_at: datetime

    class Config:
        from_attributes = True
