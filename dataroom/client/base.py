"""
Shared HTTP plumbing for the investor and admin API clients.

Every request goes through ``_request``: it attaches the bearer token, turns
non-2xx responses into APIClientError (message from the JSON ``detail`` when
it is a string, else ``HTTP <status>``), maps transport failures to status 0,
and returns ``{}`` for 2xx responses that are not JSON.
"""
from typing import Any, Dict, Optional

import httpx

from dataroom.client.config import client_settings
from dataroom.client.errors import APIClientError, NETWORK_ERROR_MESSAGE, TIMEOUT_ERROR_MESSAGE
from dataroom.client.token_store import TokenStore, MemoryTokenStore
from dataroom.core.logging_config import logger


def _is_json(response: httpx.Response) -> bool:
    return "application/json" in response.headers.get("content-type", "")


def error_from_response(response: httpx.Response, fallback_prefix: str = "") -> APIClientError:
    message = f"{fallback_prefix}HTTP {response.status_code}"
    details: Any = None

    if _is_json(response):
        try:
            details = response.json()
        except ValueError:
            details = None
        if isinstance(details, dict) and isinstance(details.get("detail"), str):
            message = details["detail"]

    return APIClientError(message, response.status_code, details)


class BaseAPIClient:
    """Async client bound to one base URL and one token key"""

    token_key: str = ""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_store: Optional[TokenStore] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url if base_url is not None else client_settings.API_BASE_URL).rstrip("/")
        self.token_store = token_store or MemoryTokenStore()
        self.timeout = timeout if timeout is not None else client_settings.REQUEST_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ==================== Token ====================

    def get_token(self) -> Optional[str]:
        return self.token_store.get(self.token_key)

    def set_token(self, token: str) -> None:
        self.token_store.set(self.token_key, token)

    def clear_token(self) -> None:
        self.token_store.clear(self.token_key)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.get_token())

    # ==================== HTTP ====================

    @property
    def http(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={"User-Agent": client_settings.USER_AGENT},
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    def _get_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        token = self.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _send(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        headers = {**self._get_headers(), **kwargs.pop("headers", {})}
        try:
            return await self.http.request(method, endpoint, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {endpoint} timed out")
            raise APIClientError(TIMEOUT_ERROR_MESSAGE, 0, e)
        except httpx.RequestError as e:
            logger.warning(f"{method} {endpoint} failed: {type(e).__name__}")
            raise APIClientError(NETWORK_ERROR_MESSAGE, 0, e)

    async def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        """JSON request; returns the decoded body, or {} when the body is not JSON"""
        response = await self._send(method, endpoint, **kwargs)

        if not response.is_success:
            raise error_from_response(response)

        if _is_json(response):
            try:
                return response.json()
            except ValueError:
                return {}
        return {}

    async def _download(self, endpoint: str) -> bytes:
        """Raw body of a file endpoint"""
        response = await self._send("GET", endpoint)
        if not response.is_success:
            raise error_from_response(response, fallback_prefix="Download failed: ")
        return response.content
