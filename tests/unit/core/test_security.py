"""
Unit Tests for Security Module
Tests for: password hashing, OTP hashing, scoped JWT tokens
"""
import pytest
from datetime import timedelta
from jose import jwt
from fastapi import HTTPException

from dataroom.core.security import (
    verify_password,
    get_password_hash,
    generate_otp_code,
    hash_otp_code,
    verify_otp_hash,
    create_access_token,
    create_user_token,
    decode_token,
    SCOPE_INVESTOR,
    SCOPE_ADMIN,
)
from dataroom.core.config import settings


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_differs_from_password(self):
        hashed = get_password_hash("testpassword123")
        assert hashed != "testpassword123"

    def test_verify_password_correct(self):
        hashed = get_password_hash("testpassword123")
        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("testpassword123")
        assert verify_password("wrongpassword", hashed) is False

    def test_long_passwords_truncated_at_72_bytes(self):
        """Bcrypt only looks at the first 72 bytes"""
        base = "a" * 72
        hashed = get_password_hash(base + "suffix-one")
        assert verify_password(base + "suffix-two", hashed) is True


class TestOTPCodes:
    """Test one-time code generation and hashing"""

    def test_generated_code_is_numeric_with_configured_length(self):
        code = generate_otp_code()
        assert len(code) == settings.OTP_LENGTH
        assert code.isdigit()

    def test_custom_length(self):
        assert len(generate_otp_code(8)) == 8

    def test_hash_is_not_the_code(self):
        assert "123456" not in hash_otp_code("a@b.com", "123456")

    def test_hash_is_bound_to_email(self):
        code_hash = hash_otp_code("a@b.com", "123456")
        assert verify_otp_hash("a@b.com", "123456", code_hash) is True
        assert verify_otp_hash("other@b.com", "123456", code_hash) is False

    def test_email_case_insensitive(self):
        code_hash = hash_otp_code("Investor@Fund.com", "654321")
        assert verify_otp_hash("investor@fund.com", "654321", code_hash) is True

    def test_wrong_code_rejected(self):
        code_hash = hash_otp_code("a@b.com", "123456")
        assert verify_otp_hash("a@b.com", "123457", code_hash) is False


class TestTokens:
    """Test JWT creation and decoding"""

    def test_user_token_carries_scope_and_subject(self):
        token = create_user_token("user-1", "a@b.com", SCOPE_INVESTOR)
        payload = decode_token(token)

        assert payload["sub"] == "user-1"
        assert payload["email"] == "a@b.com"
        assert payload["scope"] == SCOPE_INVESTOR
        assert payload["type"] == "access"

    def test_admin_scope(self):
        payload = decode_token(create_user_token("admin-1", "admin@b.com", SCOPE_ADMIN))
        assert payload["scope"] == SCOPE_ADMIN

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)

        assert exc_info.value.status_code == 401

    def test_token_signed_with_other_key_rejected(self):
        token = jwt.encode({"sub": "user-1", "type": "access"}, "not-the-key", algorithm=settings.JWT_ALGORITHM)

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)

        assert exc_info.value.detail == "Could not validate credentials"
