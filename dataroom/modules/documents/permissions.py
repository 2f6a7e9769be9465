"""
Effective document capabilities of an account.

Admins can do everything. Investors get the capabilities of their permission
level; investors without a level may view and download without a limit.
A level with ``has_expiry`` stops working once the investor's approved access
request has expired.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.core.exceptions import PermissionDeniedError, DownloadLimitReachedError
from dataroom.models import (
    User, PermissionLevel, AccessRequest, AccessRequestStatus,
    DocumentAccessLog, DocumentAction,
)


@dataclass
class Capabilities:
    can_view: bool
    can_download: bool
    max_downloads: Optional[int] = None
    downloads_used: int = 0
    level: Optional[PermissionLevel] = None

    @property
    def downloads_exhausted(self) -> bool:
        return self.max_downloads is not None and self.downloads_used >= self.max_downloads


async def count_downloads(db: AsyncSession, user_id: str) -> int:
    return await db.scalar(
        select(func.count(DocumentAccessLog.id)).where(
            DocumentAccessLog.user_id == user_id,
            DocumentAccessLog.action == DocumentAction.DOWNLOAD.value,
        )
    ) or 0


async def _access_expired(db: AsyncSession, email: str) -> bool:
    request = await db.scalar(
        select(AccessRequest)
        .where(AccessRequest.email == email, AccessRequest.status == AccessRequestStatus.APPROVED)
        .order_by(AccessRequest.requested_at.desc())
        .limit(1)
    )
    return bool(request and request.expires_at and request.expires_at <= datetime.utcnow())


async def resolve_capabilities(db: AsyncSession, user: User) -> Capabilities:
    if user.is_admin:
        return Capabilities(can_view=True, can_download=True)

    downloads_used = await count_downloads(db, user.id)

    if not user.permission_level_id:
        return Capabilities(can_view=True, can_download=True, downloads_used=downloads_used)

    level = await db.get(PermissionLevel, user.permission_level_id)
    if level is None:
        return Capabilities(can_view=True, can_download=True, downloads_used=downloads_used)

    if level.has_expiry and await _access_expired(db, user.email):
        return Capabilities(can_view=False, can_download=False, downloads_used=downloads_used, level=level)

    return Capabilities(
        can_view=level.can_view,
        can_download=level.can_download,
        max_downloads=level.max_downloads,
        downloads_used=downloads_used,
        level=level,
    )


async def ensure_can_view(db: AsyncSession, user: User) -> None:
    caps = await resolve_capabilities(db, user)
    if not caps.can_view:
        raise PermissionDeniedError("viewing documents")


async def ensure_can_download(db: AsyncSession, user: User) -> None:
    caps = await resolve_capabilities(db, user)
    if not caps.can_download:
        raise PermissionDeniedError("downloading documents")
    if caps.downloads_exhausted:
        raise DownloadLimitReachedError(caps.max_downloads)
