"""
Exceptions for the failure modes that are not plain rejections.

Rejections (unauthorized, bad JSON, schema violations, not found) are returned
as (ok, payload) results. Only the cases below are raised.
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    AUTH = "auth"
    STORAGE = "storage"
    INTERNAL = "internal"


class AnimalServiceError(Exception):
    """Base exception for the animal record service."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status

    def to_response(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
            }
        }


class IdentityResolutionError(AnimalServiceError):
    """A credential verified as authentic but carries no usable user identity."""

    def __init__(self, message: str = "User ID could not be retrieved from auth token"):
        super().__init__(
            message, "IDENTITY_RESOLUTION_FAILED", ErrorCategory.AUTH,
            ErrorSeverity.CRITICAL, 500,
        )


class StorageError(AnimalServiceError):
    """Record storage operation failed."""

    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, 503,
        )
        self.operation = operation
