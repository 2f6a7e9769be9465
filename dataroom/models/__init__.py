from dataroom.models.user import User, UserRole, ADMIN_ROLES
from dataroom.models.otp import OTPCode, OTPPurpose
from dataroom.models.nda import NDAAcceptance
from dataroom.models.permission import PermissionLevel
from dataroom.models.access_request import AccessRequest, AccessRequestStatus
from dataroom.models.document import Document, DocumentCategory, DocumentAccessLog, DocumentAction
from dataroom.models.qa import QAThread, QAStatus
from dataroom.models.audit_log import AuditLog

__all__ = [
    "User",
    "UserRole",
    "ADMIN_ROLES",
    "OTPCode",
    "OTPPurpose",
    "NDAAcceptance",
    "PermissionLevel",
    "AccessRequest",
    "AccessRequestStatus",
    "Document",
    "DocumentCategory",
    "DocumentAccessLog",
    "DocumentAction",
    "QAThread",
    "QAStatus",
    "AuditLog",
]
