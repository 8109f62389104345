from __future__ import annotations
"""
Protocols for the storage module.

The listing, aggregation and deletion services only need these calls from a
tenant's object storage, so tests can drive them with in-memory doubles.
"""

from typing import Any, Protocol, runtime_checkable

from lmsadmin_core.runtime import RunContext


@runtime_checkable
class ObjectStorage(Protocol):
    """Object storage of one tenant project, reached with one credential."""

    async def list_objects(
        self,
        bucket: str,
        prefix: str,
        limit: int,
        offset: int = 0,
        context: RunContext | None = None,
    ) -> list[dict[str, Any]]:
        """
        List one page of entries directly under ``prefix``, sorted by name.

        Args:
            bucket: Bucket name.
            prefix: Directory path ("" for the bucket root).
            limit: Page size.
            offset: Entries to skip.
            context: Optional correlation context.

        Returns:
            Raw entries; folders carry ``metadata: None``.
        """
        ...

    async def remove_objects(
        self,
        bucket: str,
        paths: list[str],
        context: RunContext | None = None,
    ) -> list[dict[str, Any]]:
        """Remove the given object paths in one bulk request."""
        ...

    async def upload_object(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
        cache_control: str = "3600",
        context: RunContext | None = None,
    ) -> dict[str, Any]:
        """Upload one object."""
        ...
