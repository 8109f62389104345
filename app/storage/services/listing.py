"""
Recursive listing of a bucket's virtual folder tree.

Object storage has no real folders: a listing of a prefix returns objects
(with metadata) and folder names (without metadata) one level deep. This
module walks that structure depth-first, page by page, and yields every
file under a starting path as a StorageEntry with its absolute path.

Usage, aggregation and folder deletion all consume this one walk.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

from loguru import logger

from app.storage.protocols import ObjectStorage
from lmsadmin_core.domain.exceptions import ListingFailed
from lmsadmin_core.domain.models import ListingResult, StorageEntry, normalize_path
from lmsadmin_core.runtime import RunContext

DEFAULT_PAGE_SIZE = 1000


async def fetch_page(
    storage: ObjectStorage,
    bucket: str,
    path: str,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
    context: RunContext | None = None,
) -> list[dict[str, Any]]:
    """
    Request one page of a directory listing.

    Raises:
        ListingFailed: If the backend call fails for any reason.
    """
    try:
        return await storage.list_objects(bucket, path, limit=limit, offset=offset, context=context)
    except Exception as e:
        prefix = context.log_prefix if context else ""
        logger.warning(f"{prefix} Listing '{path or '/'}' in {bucket} failed at offset {offset}: {e}")
        raise ListingFailed(path, bucket, e) from e


async def fetch_first_page(
    storage: ObjectStorage,
    bucket: str,
    path: str,
    page_size: int = DEFAULT_PAGE_SIZE,
    context: RunContext | None = None,
) -> list[dict[str, Any]]:
    """Offset-0 page of ``path`` in the shape ``walk(first_page=...)`` expects."""
    return await fetch_page(storage, bucket, normalize_path(path), limit=page_size + 1, context=context)


async def list_directory(
    storage: ObjectStorage,
    bucket: str,
    path: str = "",
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
    context: RunContext | None = None,
) -> list[StorageEntry]:
    """One page of a single directory, folders included (no recursion)."""
    parent = normalize_path(path)
    page = await fetch_page(storage, bucket, parent, limit=limit, offset=offset, context=context)
    return [StorageEntry.from_backend(raw, parent) for raw in page if raw.get("name")]


async def walk(
    storage: ObjectStorage,
    bucket: str,
    root_path: str = "",
    page_size: int = DEFAULT_PAGE_SIZE,
    context: RunContext | None = None,
    *,
    first_page: list[dict[str, Any]] | None = None,
) -> AsyncIterator[StorageEntry]:
    """
    Yield every file under ``root_path``, depth-first.

    Each directory is paged in name order. Every request asks for one entry
    more than ``page_size``; the extra entry only signals that another page
    exists, so a directory of exactly ``page_size`` entries costs a single
    request. A subfolder is walked completely before the next sibling is
    looked at. Empty folders produce nothing.

    Args:
        storage: Object storage of the tenant.
        bucket: Bucket name.
        root_path: Directory to start from ("" for the bucket root).
        page_size: Entries requested per page.
        context: Optional correlation context.
        first_page: Offset-0 page of ``root_path`` when the caller already
            fetched it with ``fetch_first_page``.

    Yields:
        File entries with absolute paths.

    Raises:
        ListingFailed: On the first page request that fails, at any depth.
    """
    if page_size < 1:
        raise ValueError("page_size must be positive")

    root = normalize_path(root_path)
    async for entry in _walk_directory(storage, bucket, root, page_size, context, first_page):
        yield entry


async def _walk_directory(
    storage: ObjectStorage,
    bucket: str,
    path: str,
    page_size: int,
    context: RunContext | None,
    first_page: list[dict[str, Any]] | None = None,
) -> AsyncIterator[StorageEntry]:
    offset = 0
    page = first_page
    while True:
        if page is None:
            page = await fetch_page(
                storage, bucket, path, limit=page_size + 1, offset=offset, context=context
            )

        for raw in page[:page_size]:
            if not raw.get("name"):
                continue
            entry = StorageEntry.from_backend(raw, path)
            if entry.is_file:
                yield entry
            else:
                async for child in _walk_directory(storage, bucket, entry.path, page_size, context):
                    yield child

        if len(page) <= page_size:
            return
        offset += page_size
        page = None


async def collect(entries: AsyncIterable[StorageEntry]) -> ListingResult:
    """Materialize a walk; incomplete if any file lacks a size."""
    collected = [entry async for entry in entries]
    complete = all(entry.size_bytes is not None for entry in collected if entry.is_file)
    return ListingResult(entries=collected, complete=complete)
