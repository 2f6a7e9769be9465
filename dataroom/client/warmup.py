from typing import Optional

import httpx

from dataroom.client.config import client_settings
from dataroom.core.logging_config import logger


async def warm_up_backend(
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """
    Best-effort GET /health so a sleeping backend starts waking up.
    Never raises; returns whether the backend answered 2xx.
    """
    base_url = (base_url or client_settings.API_BASE_URL).rstrip("/")
    timeout = timeout if timeout is not None else client_settings.WARMUP_TIMEOUT

    try:
        async with httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport) as client:
            response = await client.get("/health")
    except httpx.HTTPError as e:
        logger.debug(f"Backend warm-up failed: {type(e).__name__}")
        return False

    return response.is_success
