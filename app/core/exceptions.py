"""
Custom Exception Classes for the Application
Every failure the API reports maps to one of these, so handlers can render a
single error envelope with a stable `error_code`.
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class AppException(HTTPException):
    """
    Base exception class for all application exceptions.
    Provides consistent error response format.
    """

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(
            status_code=status_code,
            detail={
                "error_code": error_code,
                "message": message,
                "details": self.details,
            },
            headers=headers,
        )


# ==================== Authentication Exceptions ====================


class AuthenticationException(AppException):
    """Base class for authentication-related exceptions."""

    def __init__(
        self,
        error_code: str = "authentication_failed",
        message: str = "Not authenticated",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code=error_code,
            message=message,
            details=details,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidCredentialsException(AuthenticationException):
    """Raised when a login uses an unknown username or a wrong password."""

    def __init__(self):
        super().__init__(
            error_code="invalid_credentials",
            message="Invalid username or password",
        )


class InvalidTokenException(AuthenticationException):
    """Raised when a bearer token is malformed, expired or names no user."""

    def __init__(self, message: str = "Invalid or expired authentication token"):
        super().__init__(error_code="invalid_token", message=message)


# ==================== Authorization Exceptions ====================


class PermissionDeniedException(AppException):
    """Raised when user doesn't have permission to perform an action."""

    def __init__(
        self, message: str = "You don't have permission to perform this action"
    ):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="permission_denied",
            message=message,
        )


class OwnershipRequiredException(PermissionDeniedException):
    """Raised when action requires resource ownership."""

    def __init__(self, resource: str):
        super().__init__(
            message=f"You must be the owner of this {resource} to perform this action"
        )


# ==================== Resource Exceptions ====================


class ResourceNotFoundException(AppException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Optional[Any] = None):
        details = {}
        if identifier is not None:
            details["identifier"] = str(identifier)

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="resource_not_found",
            message=f"{resource} not found",
            details=details,
        )


class ResourceAlreadyExistsException(AppException):
    """Raised when trying to create a resource that already exists."""

    def __init__(self, resource: str, field: Optional[str] = None):
        details = {}
        if field:
            details["field"] = field

        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="resource_already_exists",
            message=f"{resource} already exists",
            details=details,
        )


class ResourceConflictException(AppException):
    """Raised when there's a conflict with the resource state."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="resource_conflict",
            message=message,
            details=details,
        )


# ==================== Validation Exceptions ====================


class InvalidArgumentException(AppException):
    """Raised when a request argument is missing or malformed."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = dict(details or {})
        if field:
            details["field"] = field

        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="invalid_argument",
            message=message,
            details=details,
        )


class InvalidFileTypeException(InvalidArgumentException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, allowed_types: Optional[list] = None):
        details = {}
        if allowed_types:
            details["allowed_types"] = list(allowed_types)
        super().__init__(
            message="Only JPEG and PNG images are allowed",
            field="image",
            details=details,
        )


class FileSizeLimitException(InvalidArgumentException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, max_bytes: Optional[int] = None):
        details = {}
        if max_bytes:
            details["max_bytes"] = max_bytes
        super().__init__(
            message="File size exceeds the limit",
            field="image",
            details=details,
        )


# ==================== Infrastructure Exceptions ====================


class DatabaseException(AppException):
    """Raised when database operation fails."""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="database_error",
            message=message,
        )


# ==================== Helper Functions ====================


def raise_not_found(resource: str, identifier: Optional[Any] = None):
    """Helper function to raise ResourceNotFoundException."""
    raise ResourceNotFoundException(resource, identifier)


def raise_invalid_argument(message: str, field: Optional[str] = None):
    """Helper function to raise InvalidArgumentException."""
    raise InvalidArgumentException(message, field)
