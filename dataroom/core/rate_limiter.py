"""
Rate Limiting for the Data Room API
===================================
slowapi limiter with in-process memory storage.

- Default: RATE_LIMIT_PER_MINUTE per client
- OTP request/verify and admin login have tighter per-endpoint limits
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from dataroom.core.config import settings
from dataroom.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    """Rate limit key: client IP; the limited endpoints are all pre-authentication"""
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    storage_uri="memory://",
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """429 with a detail message and Retry-After header"""
    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)}: {exc.detail}"
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Too many requests. Please slow down.",
            "limit": str(exc.detail),
        },
        headers={"Retry-After": "60"},
    )


def otp_rate_limit():
    """Limit for OTP request and verify endpoints"""
    return limiter.limit(settings.OTP_RATE_LIMIT)


def login_rate_limit():
    """Limit for admin password login"""
    return limiter.limit(settings.LOGIN_RATE_LIMIT)
