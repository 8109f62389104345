"""
Standardized error model for the admin console.

Every failure the console reports to a caller is a ServiceError carrying a
machine-readable code, a message safe to show an administrator, and the
HTTP status the API layer should answer with.
"""

from __future__ import annotations

import uuid
from typing import Any


class ServiceError(Exception):
    """Standardized service error.

    Attributes:
        code: Error code for programmatic handling.
        message_safe: Safe message for logging and user display.
        message_debug: Optional detailed message for debugging.
        cause: Optional underlying exception.
        debug_id: Unique identifier for support tickets.
    """

    http_status: int = 500

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        """Initialize a ServiceError.

        Args:
            code: Machine-readable error code.
            message_safe: Human-readable message safe for logs.
            message_debug: Optional detailed debug message.
            cause: Optional underlying exception.
            debug_id: Optional correlation ID (auto-generated if None).
        """
        super().__init__(message_safe)
        self.code = code
        self.message_safe = message_safe
        self.message_debug = message_debug
        self.cause = cause
        self.debug_id = debug_id or str(uuid.uuid4())[:8]

    def __str__(self) -> str:
        return f"[{self.code}] {self.message_safe}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, "
            f"message_safe={self.message_safe!r}, "
            f"debug_id={self.debug_id!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to an API error body (excludes debug info).

        Returns:
            Dictionary with an "error" string plus code and debug id.
        """
        return {
            "error": self.message_safe,
            "code": self.code,
            "debug_id": self.debug_id,
        }


class BackendError(ServiceError):
    """The hosted storage/identity backend rejected a request or was unreachable.

    ``status_code`` is the HTTP status the backend answered with, or None
    when the request never got an answer (timeout, connection refused).
    Nothing in the console retries on this error automatically.
    """

    def __init__(
        self,
        code: str,
        message_safe: str,
        status_code: int | None = None,
        message_debug: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            code=code,
            message_safe=message_safe,
            message_debug=message_debug,
            cause=cause,
        )
        self.status_code = status_code


# Common error codes
class ErrorCode:
    """Standard error codes for common failure scenarios."""

    # Network/connectivity
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Authentication/Authorization
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"

    # Validation
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # Rate limiting
    RATE_LIMITED = "RATE_LIMITED"

    # Tenancy and storage
    TENANT_NOT_CONFIGURED = "TENANT_NOT_CONFIGURED"
    LISTING_FAILED = "LISTING_FAILED"
    REMOVAL_FAILED = "REMOVAL_FAILED"

    # Internal
    INTERNAL_ERROR = "INTERNAL_ERROR"
