"""
NDA acceptance flow.

The signer must tick the agreement box and type their full legal name.
Acceptance records the caller's public IP (best effort, "unknown" when the
lookup fails) and the user agent string.
"""
import ipaddress
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from dataroom.client.api_client import APIClient
from dataroom.client.config import client_settings
from dataroom.client.errors import APIClientError
from dataroom.client.session import AuthSession
from dataroom.core.logging_config import logger

UNKNOWN_IP = "unknown"
AGREE_REQUIRED_MESSAGE = "Please check the box to agree to the NDA."
NAME_REQUIRED_MESSAGE = "Please enter your full legal name."


def normalize_ip(value: Any) -> str:
    """Canonical IP string, or UNKNOWN_IP when value is not an address"""
    if not isinstance(value, str):
        return UNKNOWN_IP
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError:
        return UNKNOWN_IP


async def resolve_ip_address(
    url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    url = url or client_settings.IP_LOOKUP_URL
    timeout = timeout if timeout is not None else client_settings.IP_LOOKUP_TIMEOUT

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.get(url)
            response.raise_for_status()
            ip = response.json().get("ip")
    except (httpx.HTTPError, ValueError, AttributeError) as e:
        logger.debug(f"IP lookup failed: {type(e).__name__}")
        return UNKNOWN_IP

    return normalize_ip(ip)


class NDAAcceptanceFlow:
    def __init__(
        self,
        client: APIClient,
        session: AuthSession,
        user_agent: Optional[str] = None,
        ip_resolver: Optional[Callable[[], Awaitable[str]]] = None,
    ):
        self.client = client
        self.session = session
        self.user_agent = user_agent or client_settings.USER_AGENT
        self.ip_resolver = ip_resolver or resolve_ip_address
        self.content: Optional[Dict[str, Any]] = None
        self.agreed = False
        self.full_name = ""
        self.loading = False
        self.error: Optional[str] = None
        self.accepted = False
        self.route: Optional[str] = None

    async def load_content(self) -> Optional[Dict[str, Any]]:
        try:
            self.content = await self.client.get_nda_content()
        except APIClientError as e:
            self.error = e.message
        return self.content

    def validate(self) -> Optional[str]:
        if not self.agreed:
            return AGREE_REQUIRED_MESSAGE
        if not self.full_name.strip():
            return NAME_REQUIRED_MESSAGE
        return None

    @property
    def can_submit(self) -> bool:
        return self.validate() is None and not self.loading

    async def submit(self) -> bool:
        self.error = self.validate()
        if self.error:
            return False

        self.loading = True
        try:
            ip_address = await self.ip_resolver()
            await self.client.accept_nda(
                digital_signature=self.full_name.strip(),
                ip_address=normalize_ip(ip_address),
                user_agent=self.user_agent,
            )
        except APIClientError as e:
            self.error = e.message
            return False
        finally:
            self.loading = False

        self.accepted = True
        await self.session.refresh_nda_status()
        self.route = self.session.home_route
        return True
