from typing import Any, Dict, List, Optional

from dataroom.client.admin_api_client import AdminAPIClient
from dataroom.client.session import AdminSession
from dataroom.console.base import ListScreen, Notifier

SUPER_ADMIN_REQUIRED_MESSAGE = "Only super admins can manage users."
REQUIRED_FIELDS_MESSAGE = "Email, full name, and password are required"

# Marks an update field that was not given, as opposed to one given as None
UNSET: Any = object()


class UsersScreen(ListScreen):
    """User management. Removing a user deactivates it; activation reverses that."""

    def __init__(self, client: AdminAPIClient, session: AdminSession, notifier: Optional[Notifier] = None):
        super().__init__(client, notifier)
        self.session = session

    async def fetch(self) -> List[Dict[str, Any]]:
        return await self.client.list_users()

    def filtered(
        self,
        search: Optional[str] = None,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> List[Dict[str, Any]]:
        needle = (search or "").strip().lower()
        rows = []
        for user in self.items:
            if role and user.get("role") != role:
                continue
            if is_active is not None and user.get("is_active") != is_active:
                continue
            if needle:
                haystack = f"{user.get('email', '')} {user.get('full_name') or ''} {user.get('company') or ''}".lower()
                if needle not in haystack:
                    continue
            rows.append(user)
        return rows

    async def create(
        self,
        email: str,
        full_name: str,
        password: str,
        role: str = "user",
        permission_level_id: Optional[str] = None,
    ) -> bool:
        if not self.session.is_super_admin:
            return self.reject(SUPER_ADMIN_REQUIRED_MESSAGE)
        if not (email.strip() and full_name.strip() and password):
            return self.reject(REQUIRED_FIELDS_MESSAGE)

        return await self.mutate(
            lambda: self.client.create_user(
                email=email.strip(),
                password=password,
                full_name=full_name.strip(),
                role=role or "user",
                permission_level_id=permission_level_id,
            ),
            "User created successfully",
        )

    async def update(
        self,
        user_id: str,
        full_name: Any = UNSET,
        role: Any = UNSET,
        is_active: Any = UNSET,
        permission_level_id: Any = UNSET,
    ) -> bool:
        """Send only the fields given; permission_level_id=None clears the level"""
        if not self.session.is_super_admin:
            return self.reject(SUPER_ADMIN_REQUIRED_MESSAGE)
        fields = {
            "full_name": full_name,
            "role": role,
            "is_active": is_active,
            "permission_level_id": permission_level_id,
        }
        payload = {key: value for key, value in fields.items() if value is not UNSET}
        return await self.mutate(
            lambda: self.client.update_user(user_id, payload),
            "User updated successfully",
        )

    async def deactivate(self, user_id: str) -> bool:
        if not self.session.is_super_admin:
            return self.reject(SUPER_ADMIN_REQUIRED_MESSAGE)
        return await self.mutate(lambda: self.client.deactivate_user(user_id), "User deactivated")

    async def activate(self, user_id: str) -> bool:
        if not self.session.is_super_admin:
            return self.reject(SUPER_ADMIN_REQUIRED_MESSAGE)
        return await self.mutate(lambda: self.client.activate_user(user_id), "User activated")

    async def view_permissions(self, user_id: str) -> Optional[Dict[str, Any]]:
        return await self.fetch_detail(lambda: self.client.get_user_permissions(user_id))
