"""
Base exception classes for application-wide error handling.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures
    ├── NotFoundError - Resource not found
    ├── ConfigurationError - Missing or invalid deployment configuration
    └── ExternalServiceError - Third-party service failures
        └── (comments.indexer.TransientFetchError)

Usage:
    from core.exceptions import ValidationError

    raise ValidationError("Unknown cursor", error_code="INVALID_CURSOR")

    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=400)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Unknown cursor",
                "error_code": "INVALID_CURSOR",
                "details": {"cursor": "..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails in the service layer.

    For DRF serializer validation, use DRF's built-in validation.
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """Raised when a requested resource is not found."""

    default_error_code: str = "NOT_FOUND"


class ConfigurationError(BaseApplicationError):
    """
    Raised when required deployment configuration is missing or unusable.

    Fatal for the affected feature until the environment is fixed.
    Raised lazily at first use rather than at import time so that
    processes that never touch the feature still start.

    Example:
        raise ConfigurationError(
            "Missing required APNs configuration: APNS_KEY_ID",
            details={"missing": ["APNS_KEY_ID"]},
        )
    """

    default_error_code: str = "CONFIGURATION_ERROR"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Log the original error for debugging but don't expose
    internal details to clients.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
