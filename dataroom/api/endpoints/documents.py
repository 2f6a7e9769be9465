"""
Document endpoints: categories, listing, upload, view/download, access logs.
"""
from fastapi import APIRouter, Depends, Query, Request, File, Form, UploadFile, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from typing import Optional, List, Dict
from pathlib import PurePath
from collections import Counter
import mimetypes

from dataroom.core.config import settings
from dataroom.core.database import get_db
from dataroom.core.exceptions import (
    DocumentNotFoundError,
    CategoryNotFoundError,
    ValidationError,
    InvalidFileTypeError,
    FileTooLargeError,
)
from dataroom.core.logging_config import logger
from dataroom.models import User, Document, DocumentCategory, DocumentAccessLog, DocumentAction
from dataroom.modules.admin.audit import log_admin_action
from dataroom.modules.auth.dependencies import get_current_admin, require_nda_accepted
from dataroom.modules.documents.permissions import ensure_can_view, ensure_can_download
from dataroom.schemas.document import (
    CategoryResponse,
    DocumentResponse,
    DocumentUrlResponse,
    DocumentAccessLogResponse,
)

router = APIRouter()


def split_csv(value: Optional[str]) -> List[str]:
    """'a, b,,c' -> ['a', 'b', 'c']"""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def matches_filters(
    document: Document,
    categories: List[str],
    tags: List[str],
    search: Optional[str],
) -> bool:
    """Any-of match on categories and on tags, substring match on title/description"""
    if categories:
        wanted = {c.lower() for c in categories}
        if not wanted.intersection(c.lower() for c in document.categories or []):
            return False
    if tags:
        wanted = {t.lower() for t in tags}
        if not wanted.intersection(t.lower() for t in document.tags or []):
            return False
    if search:
        needle = search.lower()
        haystack = f"{document.title} {document.description or ''}".lower()
        if needle not in haystack:
            return False
    return True


async def _get_document(db: AsyncSession, document_id: str) -> Document:
    document = await db.get(Document, document_id)
    if document is None:
        raise DocumentNotFoundError(document_id)
    return document


async def _record_access(
    db: AsyncSession,
    request: Request,
    document: Document,
    user: User,
    action: DocumentAction,
) -> None:
    if action == DocumentAction.VIEW:
        document.view_count = (document.view_count or 0) + 1
    else:
        document.download_count = (document.download_count or 0) + 1

    db.add(DocumentAccessLog(
        document_id=document.id,
        document_title=document.title,
        user_id=user.id,
        user_email=user.email,
        action=action.value,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    ))
    await db.commit()
    logger.log_document_event(action.value, document.id, user_email=user.email)


# ==================== Categories ====================

@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(
    parent_id: Optional[str] = Query(None, description="Return children of this category"),
    db: AsyncSession = Depends(get_db),
    account: User = Depends(require_nda_accepted)
):
    """Active categories under parent_id, or top-level categories"""
    query = select(DocumentCategory).where(DocumentCategory.is_active.is_(True))
    if parent_id:
        query = query.where(DocumentCategory.parent_category_id == parent_id)
    else:
        query = query.where(DocumentCategory.parent_category_id.is_(None))
    result = await db.execute(query.order_by(DocumentCategory.sort_order, DocumentCategory.name))
    return result.scalars().all()


@router.get("/categories/list", response_model=List[str])
async def list_category_names(
    db: AsyncSession = Depends(get_db),
    account: User = Depends(require_nda_accepted)
):
    """Names of all active categories plus any used by documents"""
    result = await db.execute(
        select(DocumentCategory.name)
        .where(DocumentCategory.is_active.is_(True))
        .order_by(DocumentCategory.sort_order, DocumentCategory.name)
    )
    names = list(result.scalars().all())

    docs = await db.execute(select(Document.categories))
    for categories in docs.scalars().all():
        for name in categories or []:
            if name not in names:
                names.append(name)
    return names


@router.get("/category/{category_id}/documents", response_model=List[DocumentResponse])
async def list_category_documents(
    category_id: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(require_nda_accepted)
):
    category = await db.get(DocumentCategory, category_id)
    if category is None:
        raise CategoryNotFoundError(category_id)

    result = await db.execute(select(Document).order_by(Document.uploaded_at.desc()))
    return [d for d in result.scalars().all() if matches_filters(d, [category.name], [], None)]


@router.get("/stats/by-category", response_model=Dict[str, int])
async def category_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Document count per category name"""
    counts: Counter = Counter()
    result = await db.execute(select(Document.categories))
    for categories in result.scalars().all():
        counts.update(categories or ["Uncategorized"])
    return dict(counts)


# ==================== Documents ====================

@router.get("/", response_model=List[DocumentResponse])
async def list_documents(
    categories: Optional[str] = Query(None, description="Comma-separated category names"),
    tags: Optional[str] = Query(None, description="Comma-separated tags"),
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    account: User = Depends(require_nda_accepted)
):
    """Documents matching any of the categories, any of the tags and the search text"""
    category_list = split_csv(categories)
    tag_list = split_csv(tags)
    search = search.strip() if search else None

    result = await db.execute(select(Document).order_by(Document.uploaded_at.desc()))
    return [
        d for d in result.scalars().all()
        if matches_filters(d, category_list, tag_list, search)
    ]


@router.post("/", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    request: Request,
    file: UploadFile = File(...),
    categories: str = Form(...),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Upload a document (admin). At least one category is required."""
    category_list = split_csv(categories)
    if not category_list:
        raise ValidationError("At least one category is required", field="categories")

    file_name = PurePath(file.filename or "").name
    if not file_name:
        raise ValidationError("File is required", field="file")

    extension = PurePath(file_name).suffix.lower().lstrip(".")
    if extension not in settings.ALLOWED_EXTENSIONS:
        raise InvalidFileTypeError(extension or "none", settings.ALLOWED_EXTENSIONS)

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise FileTooLargeError(len(content), settings.MAX_UPLOAD_SIZE)

    file_type = (
        file.content_type
        if file.content_type and file.content_type != "application/octet-stream"
        else mimetypes.guess_type(file_name)[0] or "application/octet-stream"
    )

    document = Document(
        title=(title or "").strip() or PurePath(file_name).stem,
        description=description.strip() if description and description.strip() else None,
        categories=category_list,
        tags=split_csv(tags),
        file_name=file_name,
        file_type=file_type,
        file_size=len(content),
        content=content,
        uploaded_by=current_admin.id,
    )
    db.add(document)
    await db.commit()
    await db.refresh(document)

    await log_admin_action(
        db, current_admin.id, "document_uploaded", "document", document.id,
        details={"title": document.title, "categories": category_list}, request=request
    )
    logger.log_document_event("upload", document.id, user_email=current_admin.email)
    return document


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(require_nda_accepted)
):
    return await _get_document(db, document_id)


@router.delete("/{document_id}")
async def delete_document(
    request: Request,
    document_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Permanently delete a document; its access logs stay, detached (admin)"""
    document = await _get_document(db, document_id)
    title = document.title

    await db.execute(
        update(DocumentAccessLog)
        .where(DocumentAccessLog.document_id == document_id)
        .values(document_id=None)
    )
    await db.delete(document)
    await db.commit()

    await log_admin_action(
        db, current_admin.id, "document_deleted", "document", document_id,
        details={"title": title}, request=request
    )
    logger.log_document_event("delete", document_id, user_email=current_admin.email)
    return {"message": "Document deleted successfully"}


@router.get("/{document_id}/url", response_model=DocumentUrlResponse)
async def get_document_url(
    document_id: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(require_nda_accepted)
):
    document = await _get_document(db, document_id)
    return DocumentUrlResponse(
        url=f"/api/documents/{document.id}/view",
        download_url=f"/api/documents/{document.id}/download",
        file_name=document.file_name,
        file_type=document.file_type,
    )


async def _file_response(
    db: AsyncSession,
    request: Request,
    document_id: str,
    account: User,
    action: DocumentAction,
) -> Response:
    document = await _get_document(db, document_id)
    if action == DocumentAction.VIEW:
        await ensure_can_view(db, account)
        disposition = "inline"
    else:
        await ensure_can_download(db, account)
        disposition = "attachment"

    result = await db.execute(select(Document.content).where(Document.id == document_id))
    content = result.scalar_one()
    file_name = document.file_name
    file_type = document.file_type

    await _record_access(db, request, document, account, action)

    return Response(
        content=content,
        media_type=file_type,
        headers={"Content-Disposition": f'{disposition}; filename="{file_name}"'},
    )


@router.get("/{document_id}/view")
async def view_document(
    request: Request,
    document_id: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(require_nda_accepted)
):
    """Stream the file inline and count a view"""
    return await _file_response(db, request, document_id, account, DocumentAction.VIEW)


@router.get("/{document_id}/download")
async def download_document(
    request: Request,
    document_id: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(require_nda_accepted)
):
    """Stream the file as an attachment and count a download"""
    return await _file_response(db, request, document_id, account, DocumentAction.DOWNLOAD)


@router.get("/{document_id}/access-logs", response_model=List[DocumentAccessLogResponse])
async def get_access_logs(
    document_id: str,
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Most recent views and downloads of a document (admin)"""
    await _get_document(db, document_id)
    result = await db.execute(
        select(DocumentAccessLog)
        .where(DocumentAccessLog.document_id == document_id)
        .order_by(DocumentAccessLog.accessed_at.desc())
        .limit(limit)
    )
    return result.scalars().all()
