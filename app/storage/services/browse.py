"""
One-level directory browsing for the console's file view.
"""

from __future__ import annotations

from loguru import logger

from lmsadmin_core.domain.exceptions import TenantNotConfigured, ValidationError
from lmsadmin_core.domain.models import Privilege, StorageEntry
from lmsadmin_core.runtime import RunContext
from lmsadmin_core.tenants import TenantResolver

from .listing import DEFAULT_PAGE_SIZE, list_directory

DEBUG_PAGE_LIMIT = 100


class BrowseService:
    """List a single directory of a bucket, folders included."""

    def __init__(self, resolver: TenantResolver, page_size: int = DEFAULT_PAGE_SIZE):
        self.resolver = resolver
        self.page_size = page_size

    def target(self, bucket: str | None, account: str | None) -> tuple[str, str]:
        explicit = (account or "").strip().upper()
        if bucket:
            return bucket, self.resolver.tenant_code(bucket, explicit or None)
        if explicit:
            return self.resolver.bucket_for_account(explicit), explicit
        raise ValidationError("bucket or account is required")

    def _privilege(self, code: str, preferred: tuple[Privilege, ...]) -> Privilege:
        for privilege in preferred:
            if self.resolver.supports(code, privilege):
                return privilege
        registry = self.resolver.registry
        raise TenantNotConfigured(code, registry.missing_config_keys(code, preferred[-1]), preferred[-1].value)

    async def files(
        self,
        bucket: str | None = None,
        account: str | None = None,
        path: str = "",
        context: RunContext | None = None,
    ) -> list[StorageEntry]:
        """
        First page of ``path`` in the bucket.

        The service credential is preferred so private objects show up;
        the anon credential is used when no service key is configured.
        """
        target_bucket, code = self.target(bucket, account)
        privilege = self._privilege(code, (Privilege.SERVICE, Privilege.ANON))
        client = self.resolver.client_for(code, privilege)
        if context is not None:
            context = context.for_tenant(code, target_bucket)

        entries = await list_directory(
            client.storage, target_bucket, path, limit=self.page_size, context=context
        )
        prefix = context.log_prefix if context else ""
        logger.debug(f"{prefix} Listed {len(entries)} entries at {target_bucket}/{path} via {privilege.value}")
        return entries

    async def debug_listing(
        self,
        bucket: str,
        path: str = "",
        limit: int = DEBUG_PAGE_LIMIT,
        context: RunContext | None = None,
    ) -> tuple[list[StorageEntry], Privilege]:
        """Raw one-page listing for diagnostics; anon credential preferred."""
        if not bucket:
            raise ValidationError("Bucket name is required")
        code = self.resolver.tenant_code(bucket)
        privilege = self._privilege(code, (Privilege.ANON, Privilege.SERVICE))
        client = self.resolver.client_for(code, privilege)
        entries = await list_directory(client.storage, bucket, path, limit=limit, context=context)
        return entries, privilege
