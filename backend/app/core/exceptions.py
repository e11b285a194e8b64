"""
Custom Exceptions for the BSAP statistics API
=============================================

Services raise these instead of generic Exception so the API layer can map
them to the right HTTP status and the standard error envelope.

Usage:
    from app.core.exceptions import ResourceNotFoundError, ResourceInUseError

    if not state:
        raise ResourceNotFoundError("State", state_id)

    if district_count:
        raise ResourceInUseError("state", "districts")
"""

from typing import Optional, Any, Dict


class BsapError(Exception):
    """Base exception for all application errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(BsapError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class TokenExpiredError(AuthenticationError):
    """JWT token has expired"""

    def __init__(self):
        super().__init__("Token has expired")
        self.code = "TOKEN_EXPIRED"


class InvalidTokenError(AuthenticationError):
    """JWT token is invalid"""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)
        self.code = "INVALID_TOKEN"


class AuthorizationError(BsapError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


class AccessDeniedError(AuthorizationError):
    """Data outside the caller's hierarchy scope was requested"""

    def __init__(self, message: str, scope: Optional[str] = None):
        super().__init__(message)
        self.code = "ACCESS_DENIED"
        if scope:
            self.details["scope"] = scope


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(BsapError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any = None):
        message = f"{resource_type} not found"
        details = {"resource_type": resource_type}
        if resource_id is not None:
            details["resource_id"] = str(resource_id)
        super().__init__(
            message,
            code=f"{resource_type.upper().replace(' ', '_').replace('-', '_')}_NOT_FOUND",
            details=details
        )


class UserNotFoundError(ResourceNotFoundError):
    """User not found"""

    def __init__(self, user_id: Any = None):
        super().__init__("User", user_id)


class ReportNotFoundError(ResourceNotFoundError):
    """Cached report not found"""

    def __init__(self, report_id: str):
        super().__init__("Report", report_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(BsapError):
    """Input validation failed"""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        errors: Optional[Dict[str, Any]] = None
    ):
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = errors
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class DuplicateResourceError(ValidationError):
    """Unique constraint violated"""

    def __init__(self, resource_type: str, message: Optional[str] = None):
        super().__init__(message or f"{resource_type} with this name already exists")
        self.code = "DUPLICATE_RESOURCE"
        self.details["resource_type"] = resource_type


class ResourceInUseError(ValidationError):
    """Delete blocked by dependent rows"""

    def __init__(self, resource_type: str, dependents: str):
        super().__init__(f"Cannot delete {resource_type} with associated {dependents}")
        self.code = "RESOURCE_IN_USE"
        self.details.update({"resource_type": resource_type, "dependents": dependents})


class InvalidOtpError(ValidationError):
    """OTP mismatch or expired"""

    def __init__(self, message: str = "Invalid or expired OTP"):
        super().__init__(message, field="otp")
        self.code = "INVALID_OTP"


# ============================================
# Report Errors
# ============================================

class ReportError(BsapError):
    """Report generation or export failed"""

    def __init__(self, message: str, report_id: Optional[str] = None):
        super().__init__(message, code="REPORT_ERROR")
        if report_id:
            self.details["report_id"] = report_id


class UnsupportedExportFormatError(ValidationError):
    """Export format not available"""

    def __init__(self, export_format: str, supported: list):
        super().__init__(
            f"Export format '{export_format}' is not supported. Supported: {', '.join(supported)}",
            field="format"
        )
        self.code = "UNSUPPORTED_FORMAT"
        self.details["supported"] = supported


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: BsapError) -> Dict[str, Any]:
    """Convert exception to API error envelope"""
    return {
        "status": "ERROR",
        "message": error.message,
        "code": error.code,
        "details": error.details
    }
