import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class BaseAPIException(Exception):
    """
    Root of every error a handler raises on purpose.

    Subclasses fix status_code and error_code; the Flask error handler turns
    any of them into the JSON error envelope via to_dict().
    """

    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        internal_message: Optional[str] = None,
    ):
        self.message = message
        self.details = details or {}
        # What goes to the log when it differs from what the client sees.
        self.internal_message = internal_message or message
        self.traceback = traceback.format_exc() if sys.exc_info()[0] else None
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class ValidationError(BaseAPIException):
    """Bad input: malformed body, rating out of range, wrong current password"""

    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
    ):
        super().__init__(message, {"field_errors": field_errors} if field_errors else None)


class UnauthorizedError(BaseAPIException):
    """Session token missing, unknown or expired; or bad login credentials"""

    status_code = 401
    error_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ForbiddenError(BaseAPIException):
    """Signed in, but neither the owner nor an admin"""

    status_code = 403
    error_code = "FORBIDDEN"

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class NotFoundError(BaseAPIException):
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource", resource_id: Optional[str] = None):
        message = f"{resource} not found"
        if resource_id:
            message += f" with ID: {resource_id}"
        super().__init__(message)


class ConflictError(BaseAPIException):
    status_code = 409
    error_code = "CONFLICT"

    def __init__(self, message: str = "Resource conflict", conflict_field: Optional[str] = None):
        super().__init__(message, {"conflict_field": conflict_field} if conflict_field else None)


class BusinessLogicError(BaseAPIException):
    """A store rule refused the request, e.g. checking out an empty cart"""

    status_code = 422
    error_code = "BUSINESS_LOGIC_ERROR"

    def __init__(self, message: str, rule: Optional[str] = None):
        super().__init__(message, {"violated_rule": rule} if rule else None)


class DatabaseError(BaseAPIException):
    error_code = "DATABASE_ERROR"

    def __init__(self, message: str = "Database operation failed", operation: Optional[str] = None):
        # The driver's message stays in the log only.
        super().__init__(
            "An internal error occurred. Please try again later.",
            {"operation": operation} if operation else None,
            internal_message=message,
        )


class InternalServerError(BaseAPIException):
    def __init__(self, message: str = "An unexpected error occurred", context: Optional[Dict[str, Any]] = None):
        super().__init__(
            "An internal server error occurred. Please try again later.",
            context,
            internal_message=message,
        )
