# 📄 File: app/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# This file defines the special error types the shared garden service uses to say
# what went wrong in a clear, organized way instead of generic error messages.
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy providing specific error types with HTTP status codes,
# error details, and proper serialization for API responses and error handling.
# 🔗 Dependencies:
# FastAPI HTTPException, typing, HTTP status constants
# 🔄 Connected Modules / Calls From:
# Garden engine, store implementation, dev tools, API endpoints, app.main exception handler

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class SharedGardenException(Exception):
    """
    Base exception class for the Shared Garden service.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
                "status_code": self.status_code
            }
        }

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(
            status_code=self.status_code,
            detail=self.to_dict()["error"]
        )


# =============================================================================
# VALIDATION & DATA EXCEPTIONS
# =============================================================================

class ValidationError(SharedGardenException):
    """
    Exception raised for data validation failures.
    Used for unknown item types, off-canvas coordinates and missing partners.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if constraint:
            details["constraint"] = constraint

        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            error_code="VALIDATION_ERROR"
        )


class NotFoundError(SharedGardenException):
    """
    Exception raised when requested resource is not found.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            error_code="NOT_FOUND"
        )


# =============================================================================
# AUTHORIZATION EXCEPTIONS
# =============================================================================

class AuthenticationError(SharedGardenException):
    """
    Exception raised when the caller identity is missing.
    The upstream gateway is expected to forward the user id.
    """

    def __init__(
        self,
        message: str = "Authentication required",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
            error_code="AUTHENTICATION_ERROR"
        )


class DevToolsDisabledError(SharedGardenException):
    """Raised when developer mutators are requested while the flag is off."""

    def __init__(
        self,
        message: str = "Developer tools are disabled",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
            error_code="DEV_TOOLS_DISABLED"
        )


# =============================================================================
# DATABASE & INFRASTRUCTURE EXCEPTIONS
# =============================================================================

class DatabaseError(SharedGardenException):
    """
    Exception raised for database operation failures.
    Used when the garden store is unreachable or a query fails.
    """

    def __init__(
        self,
        message: str = "Database error",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table

        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            error_code="DATABASE_ERROR"
        )


class TransactionConflictError(SharedGardenException):
    """
    Exception raised when a garden update keeps losing the version race.
    Retries are exhausted before this surfaces; callers may simply try again.
    """

    def __init__(
        self,
        message: str = "Garden update conflicted with concurrent writers",
        couple_key: Optional[str] = None,
        attempts: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if couple_key:
            details["couple_key"] = couple_key
        if attempts is not None:
            details["attempts"] = attempts

        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
            error_code="TRANSACTION_CONFLICT"
        )


class ChangeFeedError(SharedGardenException):
    """
    Exception raised when committed state cannot be pushed to subscribers.
    """

    def __init__(
        self,
        message: str = "Change feed error",
        channel: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if channel:
            details["channel"] = channel

        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            error_code="CHANGE_FEED_ERROR"
        )


# =============================================================================
# EXCEPTION UTILITIES
# =============================================================================

def exception_to_dict(exception: Exception) -> Dict[str, Any]:
    """
    Convert any exception to dictionary format.

    Args:
        exception: Exception to convert

    Returns:
        Dict: Exception data as dictionary
    """
    if isinstance(exception, SharedGardenException):
        return exception.to_dict()

    return {
        "error": {
            "code": exception.__class__.__name__.upper(),
            "message": str(exception),
            "details": {},
            "status_code": 500
        }
    }
