"""
Domain exceptions for the admin console.

Each exception is a ServiceError with the HTTP status the API answers with.
"""

from __future__ import annotations

from lmsadmin_core.runtime.errors import ErrorCode, ServiceError


class TenantNotConfigured(ServiceError):
    """The resolved tenant lacks the URL or credential for the requested tier."""

    http_status = 500

    def __init__(self, tenant_code: str, missing_keys: list[str], privilege: str | None = None):
        self.tenant_code = tenant_code
        self.missing_keys = missing_keys
        self.privilege = privilege
        label = tenant_code or "(unknown)"
        hint = f"Add {' and '.join(missing_keys)} to the environment or .env file."
        super().__init__(
            code=ErrorCode.TENANT_NOT_CONFIGURED,
            message_safe=(
                f"Storage configuration missing for this bucket/account ({label}). {hint}"
            ),
        )


class ListingFailed(ServiceError):
    """A paginated listing request failed; no partial result is reported."""

    http_status = 500

    def __init__(self, path: str, bucket: str, cause: Exception | None = None):
        self.path = path
        self.bucket = bucket
        detail = getattr(cause, "message_safe", None) or (str(cause) if cause else "unknown error")
        super().__init__(
            code=ErrorCode.LISTING_FAILED,
            message_safe=f"Failed to list '{path or '/'}' in bucket {bucket}: {detail}",
            cause=cause,
        )


class RemovalFailed(ServiceError):
    """Bulk removal failed on the primary tenant and on every fallback."""

    http_status = 500

    def __init__(self, bucket: str, attempted: list[str], cause: Exception | None = None):
        self.bucket = bucket
        self.attempted = attempted
        detail = getattr(cause, "message_safe", None) or (str(cause) if cause else "unknown error")
        super().__init__(
            code=ErrorCode.REMOVAL_FAILED,
            message_safe=detail,
            message_debug=f"bucket={bucket} attempted={attempted}",
            cause=cause,
        )


class ValidationError(ServiceError):
    """A request is missing required fields; raised before any backend call."""

    http_status = 400

    def __init__(self, message: str):
        super().__init__(code=ErrorCode.INVALID_INPUT, message_safe=message)


class UserNotFound(ServiceError):
    """No account matches the given identifier."""

    http_status = 404

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(code=ErrorCode.NOT_FOUND, message_safe="User not found")


class AccessDenied(ServiceError):
    """The caller did not present the secret a diagnostic endpoint requires."""

    http_status = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(code=ErrorCode.FORBIDDEN, message_safe=message)
