"""
Error Definitions

Defines custom exception classes used in the application for unified error handling.
"""

from typing import Any, Optional


class AppError(Exception):
    """
    Application Base Exception

    Base class for all custom exceptions, containing error message, type, and code.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "app_error",
        code: str = "internal_error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ):
        """
        Initialize exception

        Args:
            message: Error message
            error_type: Error type
            code: Error code
            details: Extra error details
            status_code: HTTP status code
        """
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.code = code
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self, include_details: bool = True) -> dict[str, Any]:
        """
        Convert to dictionary format (for API response)

        Args:
            include_details: Whether to include the details payload

        Returns:
            dict: Error information dictionary
        """
        result = {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.code,
            },
            "success": False,
        }
        if include_details and self.details:
            result["error"]["details"] = self.details
        return result


class NotFoundError(AppError):
    """
    Resource Not Found Error
    """

    def __init__(
        self,
        message: str = "Resource not found",
        code: str = "not_found",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="not_found_error",
            code=code,
            details=details,
            status_code=404,
        )


class KeyNotFoundError(NotFoundError):
    """Raised when no record exists for the requested key."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Key '{name}' not found",
            code="key_not_found",
            details={"name": name},
        )


class ConflictError(AppError):
    """
    Resource Conflict Error
    """

    def __init__(
        self,
        message: str = "Resource conflict",
        code: str = "conflict",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="conflict_error",
            code=code,
            details=details,
            status_code=409,
        )


class KeyAlreadyExistsError(ConflictError):
    """Raised when creating a key that is already present."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Key '{name}' already exists",
            code="key_already_exists",
            details={"name": name},
        )


class ReadOnlyViolationError(AppError):
    """
    Read-Only Violation Error

    Raised when attempting to change the value of a key created as read-only.
    """

    def __init__(self, name: str):
        super().__init__(
            message=f"Key '{name}' is read-only",
            error_type="permission_error",
            code="read_only_violation",
            details={"name": name},
            status_code=403,
        )


class ValidationError(AppError):
    """
    Parameter Validation Error

    Raised when request parameters do not meet requirements.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        code: str = "validation_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="validation_error",
            code=code,
            details=details,
            status_code=400,
        )


class KeyTooLongError(ValidationError):
    def __init__(self, length: int, max_length: int):
        super().__init__(
            message=f"Key name exceeds maximum length of {max_length} characters",
            code="key_too_long",
            details={"length": length, "max_length": max_length},
        )


class ValueTooLongError(ValidationError):
    def __init__(self, length: int, max_length: int):
        super().__init__(
            message=f"Value exceeds maximum length of {max_length} characters",
            code="value_too_long",
            details={"length": length, "max_length": max_length},
        )


class InvalidKeyNameError(ValidationError):
    def __init__(self, name: str):
        super().__init__(
            message="Key name must be non-empty and contain only alphanumeric characters, '_', '-' or '.'",
            code="invalid_key_name",
            details={"name": name},
        )


class RateLimitedError(AppError):
    """
    Rate Limit Error

    Raised when the shared token bucket has no token left for a request.
    """

    def __init__(self, retry_after: int = 1):
        super().__init__(
            message="Rate limit exceeded. Please try again later.",
            error_type="rate_limit_error",
            code="rate_limit_exceeded",
            details={"retry_after": retry_after},
            status_code=429,
        )
        self.retry_after = retry_after


class StorageError(AppError):
    """
    Storage Error

    Wraps any transactional or connectivity failure from the database.
    """

    def __init__(
        self,
        message: str = "Storage error",
        code: str = "storage_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="storage_error",
            code=code,
            details=details,
            status_code=503,
        )
