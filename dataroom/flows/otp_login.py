"""
OTP login flow.

Request a code, type it in, and the sixth digit submits it. Digits only;
anything else typed is dropped. A failed verification clears the code so
the next attempt starts fresh.
"""
from typing import Optional

from dataroom.client.api_client import APIClient
from dataroom.client.errors import APIClientError
from dataroom.client.session import AuthSession
from dataroom.core.logging_config import logger

CODE_LENGTH = 6
INVALID_CODE_MESSAGE = "Invalid or expired code. Please try again."
EMAIL_REQUIRED_MESSAGE = "Please enter your email address."


def digits_only(value: str) -> str:
    return "".join(ch for ch in value if ch.isdigit())


class OTPLoginFlow:
    def __init__(self, client: APIClient, session: AuthSession, purpose: str = "login"):
        self.client = client
        self.session = session
        self.purpose = purpose
        self.email = ""
        self.code = ""
        self.code_sent = False
        self.verified = False
        self.loading = False
        self.error: Optional[str] = None
        self.message: Optional[str] = None
        self.route: Optional[str] = None
        self._submitted = False

    async def request_code(self, email: str) -> bool:
        email = email.strip()
        if not email:
            self.error = EMAIL_REQUIRED_MESSAGE
            return False

        self.email = email
        self.loading = True
        self.error = None
        try:
            data = await self.client.request_otp(email, self.purpose)
        except APIClientError as e:
            self.error = e.message
            return False
        finally:
            self.loading = False

        self.code_sent = True
        self.message = data.get("message") if isinstance(data, dict) else None
        return True

    async def set_code(self, value: str) -> None:
        """Replace the code; reaching six digits submits it once"""
        self.code = digits_only(value)[:CODE_LENGTH]
        if len(self.code) < CODE_LENGTH:
            self._submitted = False
            return
        if not self._submitted:
            self._submitted = True
            await self.verify()

    async def type(self, text: str) -> None:
        await self.set_code(self.code + text)

    async def verify(self) -> bool:
        self.loading = True
        self.error = None
        try:
            data = await self.client.verify_otp(self.email, self.code, self.purpose)
        except APIClientError as e:
            self.code = ""
            self._submitted = False
            self.error = INVALID_CODE_MESSAGE if e.is_unauthorized else e.message
            logger.debug(f"OTP verification failed for {self.email}: {e.status_code}")
            return False
        finally:
            self.loading = False

        self.verified = True
        token = data.get("access_token") if isinstance(data, dict) else None
        if token:
            await self.session.login(token)
            self.route = self.session.home_route
        return True

    async def resend(self) -> bool:
        self.code = ""
        self.error = None
        self._submitted = False
        try:
            await self.client.resend_otp(self.email, self.purpose)
        except APIClientError as e:
            self.error = e.message
            return False
        self.code_sent = True
        return True
