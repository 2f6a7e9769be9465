from typing import Any, Dict, List, Optional

from dataroom.console.base import ConfirmCallback, ListScreen

REQUIRED_FIELDS_MESSAGE = "Name and description are required"


class PermissionLevelsScreen(ListScreen):
    async def fetch(self) -> List[Dict[str, Any]]:
        return await self.client.list_permission_levels()

    @staticmethod
    def build_payload(
        name: str,
        description: str,
        can_view: bool = True,
        can_download: bool = False,
        has_expiry: bool = False,
        max_downloads: Optional[int] = None,
    ) -> Dict[str, Any]:
        return {
            "name": name.strip(),
            "description": description.strip(),
            "can_view": can_view,
            "can_download": can_download,
            "has_expiry": has_expiry,
            "max_downloads": max_downloads,
        }

    async def create(self, name: str, description: str, **flags) -> bool:
        if not (name.strip() and description.strip()):
            return self.reject(REQUIRED_FIELDS_MESSAGE)
        payload = self.build_payload(name, description, **flags)
        return await self.mutate(
            lambda: self.client.create_permission_level(payload),
            "Permission level created",
        )

    async def update(self, level_id: str, name: str, description: str, **flags) -> bool:
        if not (name.strip() and description.strip()):
            return self.reject(REQUIRED_FIELDS_MESSAGE)
        payload = self.build_payload(name, description, **flags)
        return await self.mutate(
            lambda: self.client.update_permission_level(level_id, payload),
            "Permission level updated",
        )

    async def delete(self, level_id: str, confirm: ConfirmCallback) -> bool:
        level = next((lvl for lvl in self.items if lvl.get("id") == level_id), None)
        label = level.get("name") if level else level_id
        return await self.confirm_and_mutate(
            confirm,
            f"Delete permission level '{label}'? Users on it will lose their level.",
            lambda: self.client.delete_permission_level(level_id),
            "Permission level deleted",
        )
