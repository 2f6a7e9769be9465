"""
Admin account screens: sign in, register, profile and password change.
"""
from typing import Any, Dict, Optional

from dataroom.client.errors import APIClientError
from dataroom.client.session import AdminSession
from dataroom.console.base import Notifier

MIN_PASSWORD_LENGTH = 8


class AccountScreen:
    def __init__(self, session: AdminSession, notifier: Optional[Notifier] = None):
        self.session = session
        self.client = session.client
        self.notifier = notifier or Notifier()
        self.error: Optional[str] = None

    def _reject(self, message: str) -> bool:
        self.error = message
        self.notifier.error(message)
        return False

    def _failed(self, error: APIClientError) -> bool:
        return self._reject(error.message)

    async def login(self, email: str, password: str) -> bool:
        if not (email.strip() and password):
            return self._reject("Email and password are required")
        try:
            admin = await self.session.login(email.strip(), password)
        except APIClientError as e:
            return self._failed(e)
        self.error = None
        self.notifier.success(f"Welcome back, {admin.get('full_name') or admin.get('email')}")
        return True

    async def register(
        self,
        email: str,
        full_name: str,
        password: str,
        confirm_password: str,
        role: str = "admin",
    ) -> Optional[Dict[str, Any]]:
        """The very first account becomes super admin; the server decides"""
        if not (email.strip() and full_name.strip() and password and confirm_password):
            self._reject("All fields are required")
            return None
        if password != confirm_password:
            self._reject("Passwords do not match")
            return None
        if len(password) < MIN_PASSWORD_LENGTH:
            self._reject(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
            return None

        try:
            account = await self.client.register(email.strip(), password, full_name.strip(), role=role)
        except APIClientError as e:
            self._failed(e)
            return None
        self.error = None
        self.notifier.success("Account created. You can now sign in.")
        return account

    async def update_profile(self, full_name: str) -> bool:
        if not full_name.strip():
            return self._reject("Full name is required")
        try:
            self.session.admin = await self.client.update_current_admin(full_name.strip())
        except APIClientError as e:
            return self._failed(e)
        self.error = None
        self.notifier.success("Profile updated")
        return True

    async def change_password(self, current_password: str, new_password: str, confirm_password: str) -> bool:
        if not (current_password and new_password and confirm_password):
            return self._reject("All password fields are required")
        if new_password != confirm_password:
            return self._reject("New passwords do not match")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            return self._reject(f"New password must be at least {MIN_PASSWORD_LENGTH} characters")
        try:
            await self.client.change_password(current_password, new_password)
        except APIClientError as e:
            return self._failed(e)
        self.error = None
        self.notifier.success("Password changed")
        return True

    def logout(self) -> None:
        self.session.logout()
        self.notifier.info("Signed out")
