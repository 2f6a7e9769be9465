from typing import Any, Dict, List, Optional

from dataroom.console.base import ListScreen

DOCUMENT_REQUIRED_MESSAGE = "Document ID is required"
DEFAULT_LOG_LIMIT = 50


class ActivityScreen(ListScreen):
    """View/download history of one document"""

    document_id: Optional[str] = None
    limit = DEFAULT_LOG_LIMIT

    async def fetch(self) -> List[Dict[str, Any]]:
        return await self.client.get_document_access_logs(self.document_id, limit=self.limit)

    async def show(self, document_id: Optional[str], limit: int = DEFAULT_LOG_LIMIT) -> List[Dict[str, Any]]:
        document_id = (document_id or "").strip()
        if not document_id:
            self.reject(DOCUMENT_REQUIRED_MESSAGE)
            return []
        self.document_id = document_id
        self.limit = limit
        return await self.load()


class AuditLogScreen(ListScreen):
    """Admin actions, newest first; read-only"""

    action: Optional[str] = None
    target_type: Optional[str] = None
    limit = DEFAULT_LOG_LIMIT

    async def fetch(self) -> List[Dict[str, Any]]:
        return await self.client.list_audit_logs(
            action=self.action, target_type=self.target_type, limit=self.limit
        )

    async def show(
        self,
        action: Optional[str] = None,
        target_type: Optional[str] = None,
        limit: int = DEFAULT_LOG_LIMIT,
    ) -> List[Dict[str, Any]]:
        self.action = (action or "").strip() or None
        self.target_type = (target_type or "").strip() or None
        self.limit = limit
        return await self.load()
