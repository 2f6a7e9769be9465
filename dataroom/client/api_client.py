"""
Investor API client.

Holds the investor session token under the ``access_token`` key.
"""
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from dataroom.client.base import BaseAPIClient
from dataroom.client.token_store import INVESTOR_TOKEN_KEY


class APIClient(BaseAPIClient):
    token_key = INVESTOR_TOKEN_KEY

    # ==================== OTP ====================

    async def request_otp(self, email: str, purpose: str = "login") -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/auth/request-otp", json={"email": email, "purpose": purpose}
        )

    async def verify_otp(self, email: str, otp_code: str, purpose: str = "login") -> Dict[str, Any]:
        """Verify a code; a returned access token is stored"""
        data = await self._request(
            "POST", "/api/auth/verify-otp",
            json={"email": email, "otp_code": otp_code, "purpose": purpose},
        )
        if isinstance(data, dict) and data.get("access_token"):
            self.set_token(data["access_token"])
        return data

    async def resend_otp(self, email: str, purpose: str = "login") -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/auth/resend-otp", json={"email": email, "purpose": purpose}
        )

    async def demo_auto_login(self, email: str) -> Dict[str, Any]:
        data = await self._request("POST", "/api/demo/auto-login", json={"email": email})
        if isinstance(data, dict) and data.get("access_token"):
            self.set_token(data["access_token"])
        return data

    # ==================== Authentication ====================

    async def get_current_user(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/auth/me")

    def logout(self) -> None:
        self.clear_token()

    # ==================== NDA ====================

    async def get_nda_content(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/nda/content")

    async def accept_nda(self, digital_signature: str, ip_address: str, user_agent: str) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/nda/accept",
            json={
                "digital_signature": digital_signature,
                "ip_address": ip_address,
                "user_agent": user_agent,
            },
        )

    async def check_nda_status(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/nda/status")

    # ==================== Documents ====================

    async def get_categories(self, parent_id: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"parent_id": parent_id} if parent_id else None
        return await self._request("GET", "/api/documents/categories", params=params)

    async def get_categories_list(self) -> List[str]:
        return await self._request("GET", "/api/documents/categories/list")

    async def list_documents(
        self,
        categories: Optional[str] = None,
        tags: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params = {k: v for k, v in (("categories", categories), ("tags", tags), ("search", search)) if v}
        return await self._request("GET", "/api/documents/", params=params or None)

    async def get_documents_by_category(self, category_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/api/documents/category/{quote(category_id, safe='')}/documents")

    async def get_document(self, document_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/documents/{document_id}")

    async def get_document_url(self, document_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/documents/{document_id}/url")

    async def download_document(self, document_id: str) -> bytes:
        return await self._download(f"/api/documents/{document_id}/download")

    async def view_document(self, document_id: str) -> bytes:
        return await self._download(f"/api/documents/{document_id}/view")

    # ==================== Access Requests ====================

    async def submit_access_request(
        self,
        email: str,
        full_name: str,
        company: str,
        phone: Optional[str] = None,
        message: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/access-requests/",
            json={
                "email": email,
                "full_name": full_name,
                "company": company,
                "phone": phone,
                "message": message,
            },
        )

    async def check_access_request_status(self, email: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/access-requests/check/{quote(email, safe='')}")

    async def get_access_request(self, request_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/access-requests/{request_id}")

    # ==================== Permissions ====================

    async def get_user_permissions(self, user_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/permissions/user/{user_id}/permissions")

    # ==================== Q&A ====================

    async def submit_question(self, question_text: str, category: str = "General", is_urgent: bool = False) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/qa/questions",
            json={"question_text": question_text, "category": category, "is_urgent": is_urgent},
        )

    async def get_qa_threads(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/qa/threads")

    async def search_qa(self, query: str) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/qa/search", params={"q": query})

    # ==================== Company ====================

    async def get_executive_summary(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/company/executive-summary")

    async def get_key_metrics(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/company/metrics")

    async def get_milestones(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/company/milestones")

    async def get_testimonials(self, featured_only: bool = False) -> List[Dict[str, Any]]:
        params = {"featured_only": "true"} if featured_only else None
        return await self._request("GET", "/api/company/testimonials", params=params)

    async def get_awards(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/company/awards")

    async def get_media_coverage(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/company/media-coverage")

    # ==================== Health ====================

    async def health_check(self) -> Dict[str, Any]:
        return await self._request("GET", "/health")
