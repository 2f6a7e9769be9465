"""
Investor document browsing: categories, per-category listings, search,
in-app view and download to disk.
"""
import asyncio
from pathlib import Path
from typing import Any, Awaitable, Dict, List, Optional

import aiofiles

from dataroom.client.api_client import APIClient
from dataroom.client.errors import APIClientError
from dataroom.core.logging_config import logger


def safe_file_name(name: str, fallback: str) -> str:
    cleaned = Path(name or "").name.strip()
    return cleaned or fallback


class InvestorDocumentsFlow:
    def __init__(self, client: APIClient):
        self.client = client
        self.categories: List[Dict[str, Any]] = []
        self.documents: List[Dict[str, Any]] = []
        self.selected_category: Optional[str] = None
        self.error: Optional[str] = None

    async def load_categories(self, parent_id: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            self.categories = await self.client.get_categories(parent_id)
            self.error = None
        except APIClientError as e:
            self.error = e.message
        return self.categories

    async def load_category_names(self) -> List[str]:
        try:
            names = await self.client.get_categories_list()
        except APIClientError as e:
            self.error = e.message
            return []
        self.error = None
        return names

    async def load_permissions(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Effective view/download rights and the downloads used so far"""
        try:
            return await self.client.get_user_permissions(user_id)
        except APIClientError as e:
            self.error = e.message
            return None

    async def open_category(self, category_id: str) -> List[Dict[str, Any]]:
        self.selected_category = category_id
        try:
            self.documents = await self.client.get_documents_by_category(category_id)
            self.error = None
        except APIClientError as e:
            self.error = e.message
            self.documents = []
        return self.documents

    async def search(
        self,
        search: Optional[str] = None,
        categories: Optional[str] = None,
        tags: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        try:
            self.documents = await self.client.list_documents(categories=categories, tags=tags, search=search)
            self.error = None
        except APIClientError as e:
            self.error = e.message
            self.documents = []
        return self.documents

    async def view(self, document_id: str) -> Optional[bytes]:
        try:
            return await self.client.view_document(document_id)
        except APIClientError as e:
            self.error = e.message
            return None

    async def download(self, document_id: str, destination: Path) -> Optional[Path]:
        """Save a document under `destination`; returns the written path"""
        try:
            document = await self.client.get_document(document_id)
            content = await self.client.download_document(document_id)
        except APIClientError as e:
            self.error = e.message
            return None

        destination = Path(destination)
        destination.mkdir(parents=True, exist_ok=True)
        target = destination / safe_file_name(document.get("file_name"), document_id)

        async with aiofiles.open(target, "wb") as f:
            await f.write(content)

        logger.info(f"Saved {document_id} to {target} ({len(content)} bytes)")
        return target


async def _section(call: Awaitable[Any], name: str, default: Any) -> Any:
    try:
        return await call
    except APIClientError as e:
        logger.warning(f"Company {name} unavailable: {e.message}")
        return default


async def load_company_overview(client: APIClient) -> Dict[str, Any]:
    """
    Everything the company page shows. Sections load together and a failed
    section comes back empty instead of failing the page.
    """
    summary, metrics, milestones, testimonials, awards, media = await asyncio.gather(
        _section(client.get_executive_summary(), "summary", {}),
        _section(client.get_key_metrics(), "metrics", []),
        _section(client.get_milestones(), "milestones", []),
        _section(client.get_testimonials(featured_only=True), "testimonials", []),
        _section(client.get_awards(), "awards", []),
        _section(client.get_media_coverage(), "media coverage", []),
    )
    return {
        "summary": summary,
        "metrics": metrics,
        "milestones": milestones,
        "testimonials": testimonials,
        "awards": awards,
        "media": media,
    }
