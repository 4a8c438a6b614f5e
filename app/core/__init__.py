"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps (approvals, comments,
notifications). No domain logic lives here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError: Input validation failures
    - NotFoundError: Resource not found
    - ConfigurationError: Missing or unusable deployment configuration
    - ExternalServiceError: Third-party service failures

Cache (import from core.cache):
    - with_cache: Read-through JSON result cache on the Django cache

Retry (import from core.retry):
    - RetryPolicy / call_with_retries: Bounded exponential backoff

Usage:
    from core.services import BaseService, ServiceResult
    from core.exceptions import ValidationError, NotFoundError
    from core.cache import with_cache
    from core.retry import RetryPolicy, call_with_retries

Note:
    Django models are NOT imported here to avoid AppRegistryNotReady
    errors. Import them directly from their modules.
"""

# Services (no Django model dependencies)
from .services import BaseService, ServiceResult

# Exceptions (no Django dependencies)
from .exceptions import (
    BaseApplicationError,
    ConfigurationError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
    "ExternalServiceError",
]
