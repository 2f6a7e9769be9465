"""
Admin API client.

Separate session from the investor client: the token lives under the
``admin_access_token`` key.
"""
from typing import Any, Dict, List, Optional

from dataroom.client.base import BaseAPIClient
from dataroom.client.token_store import ADMIN_TOKEN_KEY


class AdminAPIClient(BaseAPIClient):
    token_key = ADMIN_TOKEN_KEY

    # ==================== Admin Auth ====================

    async def register(self, email: str, password: str, full_name: str, role: str = "admin") -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/admin-auth/register",
            json={"email": email, "password": password, "full_name": full_name, "role": role},
        )

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self._request(
            "POST", "/api/admin-auth/login", json={"username": email, "password": password}
        )
        if isinstance(data, dict) and data.get("access_token"):
            self.set_token(data["access_token"])
        return data

    def logout(self) -> None:
        self.clear_token()

    async def get_current_admin(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/admin-auth/me")

    async def update_current_admin(self, full_name: str) -> Dict[str, Any]:
        return await self._request("PUT", "/api/admin-auth/me", json={"full_name": full_name})

    async def change_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/admin-auth/change-password",
            json={"current_password": current_password, "new_password": new_password},
        )

    # ==================== Users ====================

    async def list_users(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/admin/users")

    async def create_user(
        self,
        email: str,
        password: str,
        full_name: str,
        role: str = "user",
        permission_level_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/admin/users",
            json={
                "email": email,
                "password": password,
                "full_name": full_name,
                "role": role,
                "permission_level_id": permission_level_id,
            },
        )

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/admin/users/{user_id}")

    async def update_user(self, user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/api/admin/users/{user_id}", json=payload)

    async def deactivate_user(self, user_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/api/admin/users/{user_id}")

    async def activate_user(self, user_id: str) -> Dict[str, Any]:
        return await self._request("POST", f"/api/admin/users/{user_id}/activate")

    # ==================== Access Requests ====================

    async def list_access_requests(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"request_status": status} if status else None
        return await self._request("GET", "/api/admin/access-requests", params=params)

    async def update_access_request(
        self,
        request_id: str,
        status: str,
        admin_notes: Optional[str] = None,
        expires_at: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._request(
            "PUT", f"/api/admin/access-requests/{request_id}",
            json={"status": status, "admin_notes": admin_notes, "expires_at": expires_at},
        )

    # ==================== Audit Trail ====================

    async def list_audit_logs(
        self,
        action: Optional[str] = None,
        target_type: Optional[str] = None,
        limit: int = 50,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"limit": limit}
        if action:
            params["action"] = action
        if target_type:
            params["target_type"] = target_type
        return await self._request("GET", "/api/admin/audit-logs", params=params)

    # ==================== Permission Levels ====================

    async def list_permission_levels(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/permissions/levels")

    async def get_permission_level(self, level_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/permissions/levels/{level_id}")

    async def create_permission_level(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/api/permissions/levels", json=payload)

    async def update_permission_level(self, level_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/api/permissions/levels/{level_id}", json=payload)

    async def delete_permission_level(self, level_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/api/permissions/levels/{level_id}")

    async def get_user_permissions(self, user_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/permissions/user/{user_id}/permissions")

    # ==================== Documents ====================

    async def list_document_categories(self) -> List[str]:
        return await self._request("GET", "/api/documents/categories/list")

    async def list_documents(
        self,
        categories: Optional[str] = None,
        tags: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params = {k: v for k, v in (("categories", categories), ("tags", tags), ("search", search)) if v}
        return await self._request("GET", "/api/documents/", params=params or None)

    async def get_document_category_stats(self) -> Dict[str, int]:
        return await self._request("GET", "/api/documents/stats/by-category")

    async def get_document_access_logs(self, document_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        return await self._request(
            "GET", f"/api/documents/{document_id}/access-logs", params={"limit": limit}
        )

    async def upload_document(
        self,
        file_name: str,
        content: bytes,
        categories: str,
        description: Optional[str] = None,
        tags: Optional[str] = None,
        content_type: str = "application/octet-stream",
        title: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Multipart upload: one file part plus form fields, no JSON body"""
        form = {"categories": categories}
        if description:
            form["description"] = description
        if tags:
            form["tags"] = tags
        if title:
            form["title"] = title
        return await self._request(
            "POST", "/api/documents/",
            data=form,
            files={"file": (file_name, content, content_type)},
        )

    async def get_document(self, document_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/documents/{document_id}")

    async def get_document_url(self, document_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/documents/{document_id}/url")

    async def delete_document(self, document_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/api/documents/{document_id}")

    # ==================== Q&A ====================

    async def get_qa_threads(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/qa/threads")

    async def answer_question(self, thread_id: str, answer_text: str, is_public: bool = True) -> Dict[str, Any]:
        return await self._request(
            "POST", f"/api/qa/threads/{thread_id}/answer",
            json={"answer_text": answer_text, "is_public": is_public},
        )
