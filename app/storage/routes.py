"""
Storage module routes.

Endpoints of the console's storage view:
- Bucket discovery from configured tenants
- One-level file browsing
- Bucket usage against quota
- File and folder deletion
- File upload
- A secret-gated diagnostic listing
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Header, Query, UploadFile
from loguru import logger

from app.storage.factory import (
    get_browse_service,
    get_deletion_service,
    get_registry,
    get_settings,
    get_upload_service,
    get_usage_service,
)
from app.storage.schemas import (
    BucketInfo,
    BucketListResponse,
    DebugListingResponse,
    DeleteRequest,
    DeleteResponse,
    FileListResponse,
    UploadResponse,
    UsageResponse,
)
from app.storage.services.aggregation import UsageService
from app.storage.services.browse import DEBUG_PAGE_LIMIT, BrowseService
from app.storage.services.deletion import DeletionService
from app.storage.services.discovery import discover
from app.storage.services.upload import UploadService
from lmsadmin_core.config import Settings
from lmsadmin_core.domain.exceptions import AccessDenied
from lmsadmin_core.runtime import RunContext
from lmsadmin_core.tenants import TenantRegistry

router = APIRouter(tags=["storage"])


@router.get("/buckets-all", response_model=BucketListResponse, summary="List tenant buckets")
async def list_buckets(registry: TenantRegistry = Depends(get_registry)):
    """
    List the conventional bucket of every configured tenant.

    Built from configuration only; no backend call is made.
    """
    buckets = [
        BucketInfo(id=ref.bucket_name, name=ref.bucket_name, account=ref.tenant_code)
        for ref in discover(registry)
    ]
    return BucketListResponse(buckets=buckets)


@router.get("/files", response_model=FileListResponse, summary="List one directory")
async def list_files(
    bucket: Optional[str] = Query(None, description="Bucket name"),
    account: Optional[str] = Query(None, description="Tenant code, e.g. NSG"),
    path: str = Query("", description="Directory inside the bucket"),
    browse: BrowseService = Depends(get_browse_service),
):
    """List the files and folders directly under ``path`` (not recursive)."""
    context = RunContext.new(bucket)
    entries = await browse.files(bucket=bucket, account=account, path=path, context=context)
    return FileListResponse(files=[entry.to_api() for entry in entries])


@router.get("/usage", response_model=UsageResponse, summary="Bucket usage")
async def bucket_usage(
    bucket: Optional[str] = Query(None, description="Bucket name"),
    account: Optional[str] = Query(None, description="Tenant code, e.g. NSG"),
    usage: UsageService = Depends(get_usage_service),
):
    """
    Total size of every object in the bucket and the tenant's quota.

    ``source`` names the credential tier that produced the numbers;
    ``incomplete`` is true when some object sizes could not be read.
    """
    context = RunContext.new(bucket)
    report = await usage.measure(bucket or "", account=account, context=context)
    return UsageResponse(
        used_bytes=report.used_bytes,
        total_bytes=report.total_bytes,
        source=report.source.value,
        incomplete=not report.complete,
    )


@router.post("/delete", response_model=DeleteResponse, response_model_exclude_none=True, summary="Delete a file or folder")
async def delete_path(
    request: DeleteRequest,
    deletion: DeletionService = Depends(get_deletion_service),
):
    """
    Delete one file, or every object under a folder.

    A folder is listed recursively and removed in one bulk request.
    """
    context = RunContext.new(request.bucket)
    logger.info(f"{context.log_prefix} Delete request: {request.kind} '{request.path}' in {request.bucket}")
    outcome = await deletion.delete(
        request.bucket or "",
        request.path or "",
        kind=request.kind,
        account=request.account,
        context=context,
    )
    return DeleteResponse(
        deleted=outcome.deleted,
        used_bucket=outcome.used_bucket,
        fallback_used=outcome.fallback_used,
        examples=outcome.examples,
    )


@router.post("/upload", response_model=UploadResponse, summary="Upload a file")
async def upload_file(
    file: UploadFile = File(...),
    bucket: Optional[str] = Form(None),
    account: Optional[str] = Form(None),
    path: Optional[str] = Form(None),
    uploads: UploadService = Depends(get_upload_service),
):
    """Upload one file; an existing object at the same path is not overwritten."""
    context = RunContext.new(bucket)
    content = await file.read()
    stored = await uploads.upload(
        bucket,
        file.filename,
        content,
        content_type=file.content_type,
        path=path,
        account=account,
        context=context,
    )
    return UploadResponse(bucket=stored["bucket"], path=stored["path"])


@router.get("/usage-debug", response_model=DebugListingResponse, summary="Diagnostic listing")
async def usage_debug(
    bucket: str = Query(..., description="Bucket name"),
    path: str = Query("", description="Directory inside the bucket"),
    limit: int = Query(DEBUG_PAGE_LIMIT, ge=1, le=1000),
    secret: Optional[str] = Query(None),
    x_usage_debug_secret: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
    browse: BrowseService = Depends(get_browse_service),
):
    """
    Raw listing of one directory page, for diagnosing usage numbers.

    Requires the X-Usage-Debug-Secret header (or ``secret`` query
    parameter) to match USAGE_DEBUG_SECRET; always 403 when it is unset.
    """
    presented = x_usage_debug_secret or secret
    if not settings.USAGE_DEBUG_SECRET or presented != settings.USAGE_DEBUG_SECRET:
        raise AccessDenied()

    context = RunContext.new(bucket)
    entries, source = await browse.debug_listing(bucket, path=path, limit=limit, context=context)
    return DebugListingResponse(entries=[entry.to_api() for entry in entries], source=source.value)
