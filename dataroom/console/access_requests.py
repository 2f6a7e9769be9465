from typing import Any, Dict, List, Optional

from dataroom.console.base import ListScreen

STATUS_REQUIRED_MESSAGE = "Status is required"
REQUEST_STATUSES = ("pending", "approved", "denied")


class AccessRequestsScreen(ListScreen):
    """Review queue. The status filter is applied server-side."""

    status_filter: Optional[str] = None

    async def fetch(self) -> List[Dict[str, Any]]:
        return await self.client.list_access_requests(self.status_filter)

    async def filter_by_status(self, status: Optional[str]) -> List[Dict[str, Any]]:
        if status and status not in REQUEST_STATUSES:
            raise ValueError(f"Unknown access request status: {status}")
        self.status_filter = status or None
        return await self.load()

    async def review(
        self,
        request_id: str,
        status: Optional[str],
        admin_notes: Optional[str] = None,
        expires_at: Optional[str] = None,
    ) -> bool:
        if not status:
            return self.reject(STATUS_REQUIRED_MESSAGE)

        return await self.mutate(
            lambda: self.client.update_access_request(
                request_id, status, admin_notes=admin_notes or None, expires_at=expires_at or None
            ),
            f"Access request {status}",
        )
