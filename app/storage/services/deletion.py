"""
Folder and file deletion.

A folder delete is planned by walking the folder on the first bucket-name
candidate that can be listed, then removed in one bulk request. If that
removal fails, the same request is tried once with every other configured
tenant's service credential before the failure is reported.

NOTE: the cross-tenant retry means a delete aimed at tenant A can remove
objects in tenant B's project when B has a bucket of the same name. It
exists to tolerate bucket-to-tenant mapping mistakes and only runs after
the primary removal has failed.
"""

from __future__ import annotations

from enum import Enum

from loguru import logger

from app.storage.protocols import ObjectStorage
from lmsadmin_core.domain.exceptions import ListingFailed, RemovalFailed, ValidationError
from lmsadmin_core.domain.models import DeletionPlan, Privilege, RemovalOutcome, normalize_path
from lmsadmin_core.runtime import RunContext, ServiceError
from lmsadmin_core.tenants import TenantResolver

from .listing import DEFAULT_PAGE_SIZE, collect, fetch_first_page, walk

EXAMPLE_PATHS = 5


class DeletionKind(str, Enum):
    FILE = "file"
    FOLDER = "folder"


class DeletionPlanner:
    """Turn a delete request into the flat list of object paths to remove."""

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        self.page_size = page_size

    async def plan(
        self,
        storage: ObjectStorage,
        candidates: list[str],
        root_path: str,
        kind: DeletionKind,
        context: RunContext | None = None,
    ) -> DeletionPlan:
        """
        Build the deletion plan.

        For a file the plan is the path itself and nothing is listed. For a
        folder, candidates are tried in order; the first one whose root
        listing succeeds is used for the entire walk.

        Args:
            storage: Object storage of the resolved tenant.
            candidates: Bucket names to try, explicit bucket first.
            root_path: File path or folder path.
            kind: DeletionKind.FILE or DeletionKind.FOLDER.
            context: Optional correlation context.

        Returns:
            DeletionPlan with the paths and the bucket that produced them.

        Raises:
            ListingFailed: If no candidate lists, or the walk fails deeper.
        """
        if not candidates:
            raise ValidationError("bucket is required")

        if kind is DeletionKind.FILE:
            return DeletionPlan(paths=[root_path], used_bucket=candidates[0])

        root = normalize_path(root_path)
        prefix = context.log_prefix if context else ""
        last_error: ListingFailed | None = None

        for candidate in candidates:
            try:
                first_page = await fetch_first_page(
                    storage, candidate, root, self.page_size, context=context
                )
            except ListingFailed as e:
                logger.warning(f"{prefix} Cannot list '{root}' on candidate bucket {candidate}: {e.message_safe}")
                last_error = e
                continue

            listing = await collect(
                walk(storage, candidate, root, self.page_size, context, first_page=first_page)
            )
            return DeletionPlan(
                paths=[entry.path for entry in listing.entries], used_bucket=candidate
            )

        logger.error(f"{prefix} Unable to list '{root}' on any of {candidates}")
        raise last_error or ListingFailed(root, candidates[-1])


class DeletionService:
    """Plan and execute delete requests for one bucket path."""

    def __init__(self, resolver: TenantResolver, planner: DeletionPlanner | None = None):
        self.resolver = resolver
        self.planner = planner or DeletionPlanner()

    def candidates(self, bucket: str, code: str) -> list[str]:
        """Explicit bucket first, then the tenant's conventional bucket."""
        names = [bucket]
        fallback = self.resolver.bucket_for_account(code)
        if fallback not in names:
            names.append(fallback)
        return names

    async def delete(
        self,
        bucket: str,
        path: str,
        kind: str = DeletionKind.FILE.value,
        account: str | None = None,
        context: RunContext | None = None,
    ) -> RemovalOutcome:
        """
        Delete a file or a folder tree.

        Args:
            bucket: Bucket name.
            path: Object path (file) or folder path.
            kind: "file" or "folder".
            account: Optional explicit tenant code.
            context: Optional correlation context.

        Returns:
            RemovalOutcome with the number of objects removed.

        Raises:
            ValidationError: Missing bucket/path or unknown kind.
            TenantNotConfigured: The tenant has no service credential.
            ListingFailed: The folder could not be listed.
            RemovalFailed: Removal failed on every attempted tenant.
        """
        if not bucket or not path:
            raise ValidationError("bucket and path are required")
        try:
            kind = DeletionKind(kind or DeletionKind.FILE.value)
        except ValueError:
            raise ValidationError("type must be 'file' or 'folder'")

        code = self.resolver.tenant_code(bucket, account)
        primary = self.resolver.client_for(code, Privilege.SERVICE)
        if context is not None:
            context = context.for_tenant(code, bucket)
        prefix = context.log_prefix if context else ""

        plan = await self.planner.plan(
            primary.storage, self.candidates(bucket, code), path, kind, context
        )
        if plan.is_empty:
            logger.info(f"{prefix} Nothing to delete under '{path}' in {plan.used_bucket}")
            return RemovalOutcome(deleted=0, used_bucket=plan.used_bucket)

        logger.info(
            f"{prefix} Deleting {len(plan.paths)} objects from {plan.used_bucket} "
            f"({code}) -> {plan.paths[:10]}"
        )
        try:
            removed = await primary.storage.remove_objects(plan.used_bucket, plan.paths, context)
        except ServiceError as primary_error:
            logger.error(f"{prefix} Remove on {plan.used_bucket} ({code}) failed: {primary_error}")
            fallback_code, removed, attempted = await self._remove_with_fallback(code, plan, context)
            if fallback_code is None:
                raise RemovalFailed(plan.used_bucket, [code, *attempted], primary_error) from primary_error
            return self._outcome(plan, removed, fallback_code)

        if not removed:
            logger.warning(f"{prefix} Backend removed none of {len(plan.paths)} objects in {plan.used_bucket}")
        return self._outcome(plan, removed)

    async def _remove_with_fallback(
        self,
        primary_code: str,
        plan: DeletionPlan,
        context: RunContext | None,
    ) -> tuple[str | None, list[dict], list[str]]:
        """
        Try the removal once per other configured tenant, in registry order.

        An attempt that removes nothing counts as failed: that tenant does
        not hold the planned objects.
        """
        prefix = context.log_prefix if context else ""
        attempted: list[str] = []

        for code in self.resolver.registry.codes:
            if code == primary_code:
                continue
            if not self.resolver.supports(code, Privilege.SERVICE):
                logger.info(f"{prefix} Skipping fallback tenant {code}: missing configuration")
                continue

            attempted.append(code)
            client = self.resolver.client_for(code, Privilege.SERVICE)
            try:
                logger.info(f"{prefix} Trying fallback remove on {plan.used_bucket} with tenant {code}")
                removed = await client.storage.remove_objects(plan.used_bucket, plan.paths, context)
            except ServiceError as e:
                logger.warning(f"{prefix} Fallback remove with tenant {code} failed: {e}")
                continue
            if not removed:
                logger.warning(f"{prefix} Fallback remove with tenant {code} removed nothing")
                continue
            return code, removed, attempted

        return None, [], attempted

    @staticmethod
    def _outcome(
        plan: DeletionPlan,
        removed: list[dict],
        fallback_code: str | None = None,
    ) -> RemovalOutcome:
        names = [item["name"] for item in removed if isinstance(item, dict) and item.get("name")]
        return RemovalOutcome(
            deleted=len(removed),
            used_bucket=plan.used_bucket,
            fallback_used=fallback_code,
            examples=(names or plan.paths[: len(removed)])[:EXAMPLE_PATHS],
        )
