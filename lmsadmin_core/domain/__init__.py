from .exceptions import (
    AccessDenied,
    ListingFailed,
    RemovalFailed,
    TenantNotConfigured,
    UserNotFound,
    ValidationError,
)
from .models import (
    BucketRef,
    DeletionPlan,
    ListingResult,
    Privilege,
    RemovalOutcome,
    StorageEntry,
    TenantConfig,
    UsageReport,
    join_path,
    normalize_path,
)

__all__ = [
    "AccessDenied",
    "BucketRef",
    "DeletionPlan",
    "ListingFailed",
    "ListingResult",
    "Privilege",
    "RemovalFailed",
    "RemovalOutcome",
    "StorageEntry",
    "TenantConfig",
    "TenantNotConfigured",
    "UsageReport",
    "UserNotFound",
    "ValidationError",
    "join_path",
    "normalize_path",
]
