import asyncio
from typing import Any, Dict, Optional

from dataroom.client.errors import APIClientError
from dataroom.client.session import AdminSession
from dataroom.console.base import Notifier

ADMIN_ROLES = ("admin", "super_admin")


class OverviewScreen:
    """Dashboard counters for the signed-in admin"""

    def __init__(self, session: AdminSession, notifier: Optional[Notifier] = None):
        self.session = session
        self.client = session.client
        self.notifier = notifier or Notifier()
        self.stats: Dict[str, Any] = {}
        self.error: Optional[str] = None

    async def load(self) -> Dict[str, Any]:
        try:
            users, pending = await asyncio.gather(
                self.client.list_users(),
                self.client.list_access_requests("pending"),
            )
        except APIClientError as e:
            self.error = e.message
            self.notifier.error(e.message)
            return self.stats

        admins = sum(1 for u in users if u.get("role") in ADMIN_ROLES)
        self.stats = {
            "admin": self.session.admin,
            "total_users": len(users) - admins,
            "total_admins": admins,
            "pending_access_requests": len(pending),
        }
        self.error = None
        return self.stats
