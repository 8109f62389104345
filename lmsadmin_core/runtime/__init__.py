"""
Service runtime layer for the admin console.

This package provides shared infrastructure for backend calls:
- RunContext: Request-scoped context with correlation IDs
- ServiceError / BackendError: Standardized errors
- ServiceHttpClient: Pooled async HTTP client with credential headers
"""

from .context import RunContext
from .errors import BackendError, ErrorCode, ServiceError
from .http_client import ServiceHttpClient

__all__ = [
    "RunContext",
    "ServiceError",
    "BackendError",
    "ErrorCode",
    "ServiceHttpClient",
]
