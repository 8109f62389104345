"""
Single-file upload into a tenant bucket.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from lmsadmin_core.domain.exceptions import ValidationError
from lmsadmin_core.domain.models import Privilege
from lmsadmin_core.runtime import RunContext
from lmsadmin_core.tenants import TenantResolver

DEFAULT_CONTENT_TYPE = "application/octet-stream"
CACHE_CONTROL_SECONDS = "3600"


class UploadService:
    """Upload files with the tenant's anon credential, never overwriting."""

    def __init__(self, resolver: TenantResolver):
        self.resolver = resolver

    def target(self, bucket: str | None, account: str | None) -> tuple[str, str]:
        """
        Resolve the (bucket, tenant code) an upload goes to.

        An explicit account wins: its conventional bucket is used and the
        bucket argument is ignored.
        """
        explicit = (account or "").strip().upper()
        if explicit:
            return self.resolver.bucket_for_account(explicit), explicit
        if not bucket:
            raise ValidationError("bucket or account is required")
        return bucket, self.resolver.tenant_code(bucket)

    async def upload(
        self,
        bucket: str | None,
        file_name: str | None,
        content: bytes,
        content_type: str | None = None,
        path: str | None = None,
        account: str | None = None,
        context: RunContext | None = None,
    ) -> dict[str, Any]:
        """
        Store ``content`` at ``path`` (or at the file name) in the bucket.

        Returns:
            ``{"bucket": ..., "path": ...}`` of the stored object.

        Raises:
            ValidationError: No target bucket, or neither path nor file name.
            TenantNotConfigured: The tenant has no anon credential.
            BackendError: The backend rejected the upload (e.g. 409 on an
                existing object).
        """
        target_bucket, code = self.target(bucket, account)

        object_path = (path or "").lstrip("/") or (file_name or "").lstrip("/")
        if not object_path:
            raise ValidationError("path or file name is required")

        client = self.resolver.client_for(code, Privilege.ANON)
        if context is not None:
            context = context.for_tenant(code, target_bucket)
        prefix = context.log_prefix if context else ""
        logger.info(f"{prefix} Uploading {len(content)} bytes to {target_bucket}/{object_path} ({code})")

        await client.storage.upload_object(
            target_bucket,
            object_path,
            content,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            upsert=False,
            cache_control=CACHE_CONTROL_SECONDS,
            context=context,
        )
        return {"bucket": target_bucket, "path": object_path}
