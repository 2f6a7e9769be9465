"""
One-time passcode issuing and verification.

Codes are stored hashed, expire after OTP_EXPIRE_MINUTES and allow
OTP_MAX_ATTEMPTS wrong guesses. Issuing a new code supersedes any unused
code for the same email and purpose. Callers always tell the client that a
code was sent, whether or not one was issued.
"""
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.core.config import settings
from dataroom.core.exceptions import InvalidOTPError
from dataroom.core.logging_config import logger
from dataroom.core.security import generate_otp_code, hash_otp_code, verify_otp_hash
from dataroom.models import OTPCode, OTPPurpose, User, AccessRequest, AccessRequestStatus


async def is_eligible_for_login(db: AsyncSession, email: str) -> bool:
    """Known active users, approved requesters, or anyone in demo mode"""
    if settings.DEMO_MODE:
        return True

    user = await db.scalar(select(User).where(User.email == email))
    if user is not None:
        return user.is_active

    approved = await db.scalar(
        select(AccessRequest).where(
            AccessRequest.email == email,
            AccessRequest.status == AccessRequestStatus.APPROVED,
        )
    )
    if approved is None:
        return False
    return approved.expires_at is None or approved.expires_at > datetime.utcnow()


async def issue_code(db: AsyncSession, email: str, purpose: OTPPurpose) -> Optional[str]:
    """Create a new code for email; returns None when the email is not eligible"""
    email = email.lower()

    if purpose == OTPPurpose.LOGIN and not await is_eligible_for_login(db, email):
        logger.log_auth_event("otp_request", success=False, user_email=email, reason="Not eligible")
        return None

    await db.execute(
        update(OTPCode)
        .where(OTPCode.email == email, OTPCode.purpose == purpose.value, OTPCode.is_used.is_(False))
        .values(is_used=True)
    )

    code = generate_otp_code()
    db.add(OTPCode(
        email=email,
        purpose=purpose.value,
        code_hash=hash_otp_code(email, code),
        attempts_remaining=settings.OTP_MAX_ATTEMPTS,
        expires_at=datetime.utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
    ))
    await db.commit()

    deliver_code(email, code, purpose)
    return code


def deliver_code(email: str, code: str, purpose: OTPPurpose) -> None:
    """Codes are logged rather than emailed; the clear code only in demo mode"""
    logger.log_auth_event("otp_request", success=True, user_email=email, purpose=purpose.value)
    if settings.DEMO_MODE:
        logger.info(f"[OTP] {purpose.value} code for {email}: {code}")


async def verify_code(db: AsyncSession, email: str, code: str, purpose: OTPPurpose) -> None:
    """Consume a matching code or raise InvalidOTPError"""
    email = email.lower()
    now = datetime.utcnow()

    otp = await db.scalar(
        select(OTPCode)
        .where(OTPCode.email == email, OTPCode.purpose == purpose.value, OTPCode.is_used.is_(False))
        .order_by(OTPCode.created_at.desc())
        .limit(1)
    )

    if otp is None or not otp.is_usable(now):
        logger.log_auth_event("otp_verify", success=False, user_email=email, reason="No active code")
        raise InvalidOTPError()

    if not verify_otp_hash(email, code, otp.code_hash):
        otp.attempts_remaining -= 1
        if otp.attempts_remaining <= 0:
            otp.is_used = True
        await db.commit()
        logger.log_auth_event(
            "otp_verify", success=False, user_email=email,
            reason="Wrong code", attempts_remaining=otp.attempts_remaining
        )
        raise InvalidOTPError()

    otp.is_used = True
    await db.commit()
    logger.log_auth_event("otp_verify", success=True, user_email=email, purpose=purpose.value)
