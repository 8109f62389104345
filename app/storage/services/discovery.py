"""
Bucket discovery from configuration alone.
"""

from __future__ import annotations

from loguru import logger

from lmsadmin_core.domain.models import BucketRef, Privilege
from lmsadmin_core.tenants import TenantRegistry


def discover(registry: TenantRegistry) -> list[BucketRef]:
    """
    List the conventional bucket of every usable tenant.

    A tenant is listed when it has both a base URL and an anon credential.
    No backend call is made; order follows the registry's tenant order.
    """
    buckets = []
    for tenant in registry:
        if not tenant.is_usable:
            missing = registry.missing_config_keys(tenant.code, Privilege.ANON)
            logger.warning(f"Skipping tenant {tenant.code}: missing {', '.join(missing)}")
            continue
        buckets.append(BucketRef(bucket_name=registry.bucket_for(tenant.code), tenant_code=tenant.code))
    return buckets
