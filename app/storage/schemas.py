"""
Pydantic schemas for the storage module.

Field aliases keep the camelCase wire names the console frontend expects.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class BucketInfo(BaseModel):
    """One discovered bucket."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    public: bool = False
    created_at: Optional[str] = None
    account: str = Field(alias="_account")


class BucketListResponse(BaseModel):
    buckets: list[BucketInfo]


class FileListResponse(BaseModel):
    files: list[dict[str, Any]]


class UsageResponse(BaseModel):
    """Occupied and total bytes of a bucket."""

    model_config = ConfigDict(populate_by_name=True)

    used_bytes: int = Field(alias="usedBytes")
    total_bytes: int = Field(alias="totalBytes")
    source: str
    incomplete: bool


class DeleteRequest(BaseModel):
    """Request body of a delete call. ``type`` is "file" or "folder"."""

    model_config = ConfigDict(populate_by_name=True)

    bucket: Optional[str] = None
    path: Optional[str] = None
    kind: str = Field("file", alias="type")
    account: Optional[str] = None


class DeleteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    deleted: int
    used_bucket: str = Field(alias="usedBucket")
    fallback_used: Optional[str] = Field(None, alias="fallbackUsed")
    examples: list[str] = Field(default_factory=list)


class UploadResponse(BaseModel):
    success: bool = True
    bucket: str
    path: str


class DebugListingResponse(BaseModel):
    entries: list[dict[str, Any]]
    source: str
