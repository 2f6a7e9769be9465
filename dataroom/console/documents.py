"""
Admin document library: upload, list (server filters plus local sort and
grouping), detail, category stats and confirmed deletion.
"""
import mimetypes
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles

from dataroom.client.admin_api_client import AdminAPIClient
from dataroom.console.base import ConfirmCallback, ListScreen, Notifier

FILE_REQUIRED_MESSAGE = "Please select a file to upload"
CATEGORY_REQUIRED_MESSAGE = "At least one category is required"
SORT_FIELDS = ("name", "uploaded_at")


def parse_categories(value: str) -> List[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


class DocumentsScreen(ListScreen):
    def __init__(self, client: AdminAPIClient, notifier: Optional[Notifier] = None):
        super().__init__(client, notifier)
        self.categories: Optional[str] = None
        self.tags: Optional[str] = None
        self.search: Optional[str] = None
        self.sort_by = "uploaded_at"
        self.descending = True

    async def fetch(self) -> List[Dict[str, Any]]:
        return await self.client.list_documents(
            categories=self.categories, tags=self.tags, search=self.search
        )

    async def apply_filters(
        self,
        categories: Optional[str] = None,
        tags: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        self.categories = categories or None
        self.tags = tags or None
        self.search = search or None
        return await self.load()

    def set_sort(self, sort_by: str, descending: bool = False) -> None:
        if sort_by not in SORT_FIELDS:
            raise ValueError(f"Cannot sort documents by {sort_by!r}")
        self.sort_by = sort_by
        self.descending = descending

    def sorted_items(self) -> List[Dict[str, Any]]:
        if self.sort_by == "name":
            key = lambda d: (d.get("title") or d.get("file_name") or "").lower()
        else:
            key = lambda d: d.get("uploaded_at") or ""
        return sorted(self.items, key=key, reverse=self.descending)

    def grouped(self) -> "OrderedDict[str, List[Dict[str, Any]]]":
        """Sorted documents bucketed by primary category, first seen first"""
        groups: "OrderedDict[str, List[Dict[str, Any]]]" = OrderedDict()
        for document in self.sorted_items():
            category = document.get("primary_category") or (
                document.get("categories") or ["Uncategorized"]
            )[0]
            groups.setdefault(category, []).append(document)
        return groups

    async def upload(
        self,
        file_path: Optional[Path],
        categories: str,
        description: Optional[str] = None,
        tags: Optional[str] = None,
        title: Optional[str] = None,
    ) -> bool:
        if file_path is None or not Path(file_path).is_file():
            return self.reject(FILE_REQUIRED_MESSAGE)
        category_list = parse_categories(categories)
        if not category_list:
            return self.reject(CATEGORY_REQUIRED_MESSAGE)

        path = Path(file_path)
        async with aiofiles.open(path, "rb") as f:
            content = await f.read()
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"

        return await self.mutate(
            lambda: self.client.upload_document(
                file_name=path.name,
                content=content,
                categories=",".join(category_list),
                description=description or None,
                tags=tags or None,
                content_type=content_type,
                title=title or None,
            ),
            f"Uploaded {path.name}",
        )

    async def delete(self, document_id: str, confirm: ConfirmCallback) -> bool:
        """Permanent; nothing is sent unless `confirm` agrees"""
        document = next((d for d in self.items if d.get("id") == document_id), None)
        label = document.get("title") if document else document_id
        return await self.confirm_and_mutate(
            confirm,
            f"Delete document '{label}'? This cannot be undone.",
            lambda: self.client.delete_document(document_id),
            "Document deleted",
        )

    async def category_stats(self) -> Optional[Dict[str, int]]:
        return await self.fetch_detail(self.client.get_document_category_stats)

    async def detail(self, document_id: str) -> Optional[Dict[str, Any]]:
        """Document with its resolved URLs and uploader name"""
        document = await self.fetch_detail(lambda: self.client.get_document(document_id))
        if document is None:
            return None
        urls = await self.fetch_detail(lambda: self.client.get_document_url(document_id)) or {}

        uploader_name = "Unknown"
        uploader_id = document.get("uploaded_by")
        if uploader_id:
            uploader = await self.fetch_detail(lambda: self.client.get_user(uploader_id))
            if uploader:
                uploader_name = uploader.get("full_name") or uploader.get("email") or uploader_name

        return {**document, **urls, "uploader_name": uploader_name}
