"""
Custom Exceptions for the Data Room backend
===========================================

Domain code raises these instead of HTTPException; the handler registered
in dataroom.main turns them into JSON responses carrying a ``detail`` string.

Usage:
    from dataroom.core.exceptions import DocumentNotFoundError

    if not document:
        raise DocumentNotFoundError(document_id)
"""

from typing import Optional, Any, Dict


class DataroomError(Exception):
    """Base exception for all data room errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detail": self.message,
            "code": self.code,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(DataroomError):
    """Authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class InvalidOTPError(AuthenticationError):
    """One-time code is wrong, expired or exhausted"""

    def __init__(self, message: str = "Invalid or expired code"):
        super().__init__(message)
        self.code = "INVALID_OTP"


class AuthorizationError(DataroomError):
    """Caller not allowed to perform this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


class NDARequiredError(AuthorizationError):
    """Investor has not accepted the current NDA"""

    def __init__(self):
        super().__init__("NDA acceptance required")
        self.code = "NDA_REQUIRED"


class PermissionDeniedError(AuthorizationError):
    """Permission level does not allow the action"""

    def __init__(self, action: str):
        super().__init__(f"Your permission level does not allow {action}")
        self.code = "PERMISSION_DENIED"
        self.details = {"action": action}


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(DataroomError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)}
        )


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class DocumentNotFoundError(ResourceNotFoundError):
    def __init__(self, document_id: str):
        super().__init__("Document", document_id)


class CategoryNotFoundError(ResourceNotFoundError):
    def __init__(self, category_id: str):
        super().__init__("Category", category_id)


class PermissionLevelNotFoundError(ResourceNotFoundError):
    def __init__(self, level_id: str):
        super().__init__("Permission level", level_id)


class AccessRequestNotFoundError(ResourceNotFoundError):
    def __init__(self, request_id: str):
        super().__init__("Access request", request_id)


class QAThreadNotFoundError(ResourceNotFoundError):
    def __init__(self, thread_id: str):
        super().__init__("Question", thread_id)


# ============================================
# Validation / Conflict Errors (400/409-type)
# ============================================

class ValidationError(DataroomError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class InvalidFileTypeError(ValidationError):
    """File type not allowed"""

    def __init__(self, file_type: str, allowed_types: list):
        super().__init__(
            f"File type '{file_type}' not allowed. Allowed: {', '.join(allowed_types)}"
        )
        self.code = "INVALID_FILE_TYPE"
        self.details = {"file_type": file_type, "allowed_types": allowed_types}


class FileTooLargeError(ValidationError):
    def __init__(self, size: int, max_size: int):
        super().__init__(f"File too large ({size} bytes). Maximum is {max_size} bytes")
        self.code = "FILE_TOO_LARGE"
        self.details = {"size": size, "max_size": max_size}


class ConflictError(DataroomError):
    """Resource already exists or state forbids the change"""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class DownloadLimitReachedError(AuthorizationError):
    def __init__(self, max_downloads: int):
        super().__init__(f"Download limit of {max_downloads} reached")
        self.code = "DOWNLOAD_LIMIT_REACHED"
        self.details = {"max_downloads": max_downloads}
