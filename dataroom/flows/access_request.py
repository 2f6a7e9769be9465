from dataclasses import dataclass
from typing import Any, Dict, Optional

from dataroom.client.api_client import APIClient
from dataroom.client.errors import APIClientError

REQUIRED_FIELDS_MESSAGE = "Email, full name, and organization are required."


@dataclass
class AccessRequestForm:
    email: str = ""
    full_name: str = ""
    company: str = ""
    phone: Optional[str] = None
    message: Optional[str] = None
    role_title: Optional[str] = None
    investor_type: Optional[str] = None

    def is_complete(self) -> bool:
        return all(value.strip() for value in (self.email, self.full_name, self.company))

    def compose_message(self) -> Optional[str]:
        """Role title and investor type ride along in the free-text message"""
        lines = []
        if self.role_title:
            lines.append(f"Role: {self.role_title}")
        if self.investor_type:
            lines.append(f"Investor type: {self.investor_type}")
        if self.message:
            lines.append(self.message)
        return "\n".join(lines) or None


class AccessRequestFlow:
    """Public access request form"""

    def __init__(self, client: APIClient):
        self.client = client
        self.loading = False
        self.submitted = False
        self.error: Optional[str] = None
        self.result: Optional[Dict[str, Any]] = None

    async def submit(self, form: AccessRequestForm) -> bool:
        if not form.is_complete():
            self.error = REQUIRED_FIELDS_MESSAGE
            return False

        self.loading = True
        self.error = None
        try:
            self.result = await self.client.submit_access_request(
                email=form.email.strip(),
                full_name=form.full_name.strip(),
                company=form.company.strip(),
                phone=form.phone or None,
                message=form.compose_message(),
            )
        except APIClientError as e:
            self.error = e.message
            return False
        finally:
            self.loading = False

        self.submitted = True
        return True

    async def check_status(self, email: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.client.check_access_request_status(email.strip())
        except APIClientError as e:
            self.error = e.message
            return None

    async def load(self, request_id: str) -> Optional[Dict[str, Any]]:
        """A submitted request by id, as returned after submission"""
        try:
            self.result = await self.client.get_access_request(request_id.strip())
        except APIClientError as e:
            self.error = e.message
            return None
        return self.result
