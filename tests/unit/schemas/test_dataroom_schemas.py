"""
Unit Tests for request/response schemas
"""
import pytest
from datetime import datetime
from pydantic import ValidationError

from dataroom.models import UserRole
from dataroom.models.otp import OTPPurpose
from dataroom.schemas.admin import AdminLogin, AdminRegister, ChangePasswordRequest
from dataroom.schemas.auth import OTPVerify, OTPRequest
from dataroom.schemas.document import DocumentResponse
from dataroom.schemas.nda import NDAAcceptRequest
from dataroom.schemas.permission import PermissionLevelCreate, PermissionLevelUpdate
from dataroom.schemas.qa import QuestionCreate, AnswerCreate


class TestAuthSchemas:
    def test_otp_request_default_purpose(self):
        assert OTPRequest(email="a@b.com").purpose == OTPPurpose.LOGIN

    def test_otp_request_invalid_email(self):
        with pytest.raises(ValidationError):
            OTPRequest(email="not-an-email")

    def test_otp_verify_rejects_letters(self):
        with pytest.raises(ValidationError):
            OTPVerify(email="a@b.com", otp_code="12ab56")

    def test_otp_verify_strips_whitespace(self):
        assert OTPVerify(email="a@b.com", otp_code=" 123456 ").otp_code == "123456"


class TestAdminSchemas:
    def test_login_accepts_username_field(self):
        data = AdminLogin.model_validate({"username": "admin@b.com", "password": "x"})
        assert data.email == "admin@b.com"

    def test_register_defaults_to_admin(self):
        data = AdminRegister(email="a@b.com", password="longenough", full_name="A")
        assert data.role == UserRole.ADMIN

    def test_register_short_password(self):
        with pytest.raises(ValidationError):
            AdminRegister(email="a@b.com", password="short", full_name="A")

    def test_change_password_minimum_length(self):
        with pytest.raises(ValidationError):
            ChangePasswordRequest(current_password="old", new_password="1234567")


class TestPermissionSchemas:
    def test_create_defaults(self):
        level = PermissionLevelCreate(name="Observer", description="Read only")
        assert level.can_view is True
        assert level.can_download is False
        assert level.has_expiry is False
        assert level.max_downloads is None

    @pytest.mark.parametrize("field", ["name", "description"])
    def test_create_rejects_blank(self, field):
        data = {"name": "Observer", "description": "Read only", field: "   "}
        with pytest.raises(ValidationError):
            PermissionLevelCreate(**data)

    def test_update_rejects_blank_name(self):
        with pytest.raises(ValidationError):
            PermissionLevelUpdate(name="")

    def test_update_allows_partial(self):
        assert PermissionLevelUpdate(can_download=True).model_dump(exclude_unset=True) == {"can_download": True}


class TestContentSchemas:
    def test_nda_signature_required(self):
        with pytest.raises(ValidationError):
            NDAAcceptRequest(digital_signature="  ", user_agent="ua")

    def test_nda_ip_defaults_to_unknown(self):
        assert NDAAcceptRequest(digital_signature="Jane Doe", user_agent="ua").ip_address == "unknown"

    def test_question_minimum_length(self):
        with pytest.raises(ValidationError):
            QuestionCreate(question_text="too short")

    def test_answer_minimum_length(self):
        with pytest.raises(ValidationError):
            AnswerCreate(answer_text="no")

    def test_document_response_urls(self):
        doc = DocumentResponse(
            id="doc-1",
            title="Deck",
            file_name="deck.pdf",
            file_type="application/pdf",
            file_size=10,
            uploaded_at=datetime.utcnow(),
        )
        dumped = doc.model_dump()
        assert dumped["file_path"] == "/api/documents/doc-1/download"
        assert dumped["file_url"] == "/api/documents/doc-1/view"
