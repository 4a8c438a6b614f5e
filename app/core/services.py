"""
Base service layer patterns for business logic encapsulation.

This module provides the foundational patterns shared by every app:
- ServiceResult: Explicit success/failure value for multi-step operations
- BaseService: Base class with per-service logging and exception capture

Pattern Comparison:
    - ServiceResult: Use for expected failures that callers compose
      (a remote fetch that may fail, a store write that may be skipped)
    - Exceptions: Use for failures that must abort the caller
      (exhausted fetch retries, missing gateway credentials)

Usage:
    from core.services import BaseService, ServiceResult

    class ApprovalService(BaseService):
        @classmethod
        def upsert_account(cls, address: str) -> ServiceResult[AppAccount]:
            return cls.capture(
                lambda: AppAccount.objects.get_or_create(id=address)[0],
                context="upsert account",
            )

    result = ApprovalService.upsert_account("0xabc")
    if not result:
        logger.warning(result.error)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code

    Usage:
        result = ApprovalService.count_active(app, chain_id)
        if result.success:
            count = result.data
        else:
            print(f"Error: {result.error} ({result.error_code})")
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, data: T) -> ServiceResult[T]:
        """Alias for success() - use whichever reads better in context."""
        return cls(success=True, data=data)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """Create a successful result."""
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code

        Example:
            return ServiceResult.failure("Indexer unavailable", "FETCH_FAILED")
        """
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def from_exception(
        cls, exc: Exception, error_code: str | None = None
    ) -> ServiceResult[T]:
        """
        Create a failed result from an exception.

        The error code defaults to the exception class name in upper case.
        """
        return cls(
            success=False,
            error=str(exc),
            error_code=error_code or exc.__class__.__name__.upper(),
        )

    def unwrap_or(self, default: T) -> T:
        """Return the data when successful, otherwise ``default``."""
        if self.success:
            return self.data  # type: ignore[return-value]
        return default

    def to_response(self) -> dict[str, Any]:
        """Convert to an API response body."""
        if self.success:
            return {"success": True, "data": self.data}

        response: dict[str, Any] = {"success": False, "error": self.error}
        if self.error_code:
            response["error_code"] = self.error_code
        return response

    def map(self, func) -> ServiceResult:
        """Transform the data if successful; failures pass through unchanged."""
        if self.success:
            return ServiceResult.success(func(self.data))
        return self  # type: ignore

    def __bool__(self) -> bool:
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Design Notes:
        - Services are stateless (class methods only)
        - Use ServiceResult for failures the caller is expected to absorb
        - Raise exceptions for failures that must fail the job or request
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Logger named after the service class for easy filtering."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    def handle_exception(
        cls,
        exc: Exception,
        context: str = "",
        log_level: int = logging.ERROR,
    ) -> ServiceResult:
        """
        Log an exception and convert it to a failed ServiceResult.

        Args:
            exc: The caught exception
            context: Short description of the failed step
            log_level: Logging level (default ERROR)
        """
        message = f"{context}: {exc}" if context else str(exc)
        cls.get_logger().log(log_level, message, exc_info=True)
        return ServiceResult.from_exception(exc)

    @classmethod
    def capture(cls, func: Callable[[], T], context: str = "") -> ServiceResult[T]:
        """
        Run ``func`` and wrap its outcome in a ServiceResult.

        Any exception is logged through handle_exception() and returned as
        a failure, so independent steps can be composed without one step's
        error aborting the next.
        """
        try:
            return ServiceResult.success(func())
        except Exception as exc:
            return cls.handle_exception(exc, context)
