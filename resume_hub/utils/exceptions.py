"""
Custom Exception Classes for the Resume Hub service
"""
from typing import Dict, Any
from fastapi import HTTPException


class ResumeHubError(Exception):
    """Base exception for Resume Hub"""

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(ResumeHubError):
    """Raised when request data fails validation"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["invalid_value"] = str(value)
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class NotFoundError(ResumeHubError):
    """Raised when a resume or job does not exist"""

    def __init__(self, message: str, resource: str = None, resource_id: str = None, **kwargs):
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message, error_code="NOT_FOUND", details=details, **kwargs)


class AuthenticationError(ResumeHubError):
    """Raised when the caller identity is missing"""

    def __init__(self, message: str = "Authentication required", **kwargs):
        super().__init__(message, error_code="AUTHENTICATION_ERROR", **kwargs)


class AuthorizationError(ResumeHubError):
    """Raised when the caller lacks the role or ownership for a resource"""

    def __init__(self, message: str = "Insufficient permissions", resource: str = None, **kwargs):
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        super().__init__(message, error_code="FORBIDDEN", details=details, **kwargs)


class DocumentParseError(ResumeHubError):
    """Raised when an uploaded document cannot be turned into text"""

    def __init__(self, message: str, filename: str = None, mimetype: str = None, **kwargs):
        details = kwargs.pop("details", {})
        if filename:
            details["filename"] = filename
        if mimetype:
            details["mimetype"] = mimetype
        super().__init__(message, error_code="DOCUMENT_PARSE_ERROR", details=details, **kwargs)


def map_to_http_exception(exc: ResumeHubError) -> HTTPException:
    """Map custom exceptions to HTTP exceptions"""

    status_code_mapping = {
        ValidationError: 400,
        DocumentParseError: 400,
        AuthenticationError: 401,
        AuthorizationError: 403,
        NotFoundError: 404,
    }

    status_code = status_code_mapping.get(type(exc), 500)

    detail = {
        "error": exc.to_dict(),
        "message": exc.message
    }

    return HTTPException(status_code=status_code, detail=detail)
