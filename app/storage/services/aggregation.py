"""
Bucket usage aggregation.

Sums object sizes over a recursive walk. A low-privilege credential can see
objects without seeing their metadata sizes; when that happens the walk is
repeated once with the tenant's service credential.
"""

from __future__ import annotations

from collections.abc import AsyncIterable

from loguru import logger
from pydantic import BaseModel

from lmsadmin_core.domain.exceptions import TenantNotConfigured, ValidationError
from lmsadmin_core.domain.models import Privilege, StorageEntry, UsageReport
from lmsadmin_core.runtime import RunContext
from lmsadmin_core.tenants import TenantResolver

from .listing import DEFAULT_PAGE_SIZE, walk


class Aggregate(BaseModel):
    """Fold result over a walk."""

    used_bytes: int = 0
    complete: bool = True
    file_count: int = 0

    model_config = {"frozen": True}

    @property
    def needs_escalation(self) -> bool:
        """Sizes were missing, or files were seen but summed to nothing."""
        return not self.complete or (self.used_bytes == 0 and self.file_count > 0)


async def aggregate(entries: AsyncIterable[StorageEntry]) -> Aggregate:
    """
    Sum ``size_bytes`` over the file entries of a walk.

    A file without a size marks the result incomplete; its bytes are not
    guessed.
    """
    used_bytes = 0
    file_count = 0
    complete = True
    async for entry in entries:
        if not entry.is_file:
            continue
        file_count += 1
        if entry.size_bytes is None:
            complete = False
        else:
            used_bytes += entry.size_bytes
    return Aggregate(used_bytes=used_bytes, complete=complete, file_count=file_count)


class UsageService:
    """
    Measure how many bytes a bucket occupies.

    The first pass uses the lowest credential tier configured for the
    tenant. If that pass is incomplete, or counts files but no bytes, and a
    service credential exists, the walk is repeated once with it. The
    report says which tier produced the final numbers.
    """

    def __init__(self, resolver: TenantResolver, page_size: int = DEFAULT_PAGE_SIZE):
        self.resolver = resolver
        self.page_size = page_size

    async def _measure_with(
        self,
        code: str,
        privilege: Privilege,
        bucket: str,
        path: str,
        context: RunContext | None,
    ) -> Aggregate:
        client = self.resolver.client_for(code, privilege)
        return await aggregate(walk(client.storage, bucket, path, self.page_size, context))

    async def measure(
        self,
        bucket: str,
        account: str | None = None,
        path: str = "",
        context: RunContext | None = None,
    ) -> UsageReport:
        """
        Compute the usage report of ``bucket``.

        Args:
            bucket: Bucket name.
            account: Optional explicit tenant code.
            path: Optional subtree to measure instead of the whole bucket.
            context: Optional correlation context.

        Returns:
            UsageReport with used/total bytes and the credential tier used.

        Raises:
            ValidationError: If no bucket is given.
            TenantNotConfigured: If the tenant has no usable credential.
            ListingFailed: If any listing request fails.
        """
        if not bucket:
            raise ValidationError("Bucket name is required")

        code = self.resolver.tenant_code(bucket, account)
        if context is not None:
            context = context.for_tenant(code, bucket)
        registry = self.resolver.registry
        prefix = context.log_prefix if context else ""

        source = self.resolver.lowest_privilege(code)
        if source is None:
            raise TenantNotConfigured(
                code, registry.missing_config_keys(code, Privilege.ANON), Privilege.ANON.value
            )

        result = await self._measure_with(code, source, bucket, path, context)

        if (
            result.needs_escalation
            and source is Privilege.ANON
            and self.resolver.supports(code, Privilege.SERVICE)
        ):
            logger.info(
                f"{prefix} Usage of {bucket} via anon is incomplete "
                f"(files={result.file_count}, bytes={result.used_bytes}); retrying with service credential"
            )
            source = Privilege.SERVICE
            result = await self._measure_with(code, source, bucket, path, context)

        logger.info(
            f"{prefix} Usage of {bucket}: {result.used_bytes} bytes in {result.file_count} files "
            f"(source={source.value}, complete={result.complete})"
        )

        return UsageReport(
            bucket=bucket,
            tenant_code=code,
            used_bytes=result.used_bytes,
            total_bytes=registry.quota_bytes_for(code),
            source=source,
            complete=result.complete,
            file_count=result.file_count,
        )
