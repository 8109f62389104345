"""
Domain models for multi-tenant storage administration.

All models are immutable and built fresh for each operation; none of them
outlive the request that produced it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Privilege(str, Enum):
    """Credential tier used against a tenant project."""

    ANON = "anon"
    SERVICE = "service"


def normalize_path(path: str | None) -> str:
    """Strip surrounding slashes so paths join as ``parent/name``."""
    return (path or "").strip().strip("/")


def join_path(parent: str, name: str) -> str:
    """Absolute object path of ``name`` listed under ``parent``."""
    return f"{parent}/{name}" if parent else name


class TenantConfig(BaseModel):
    """Connection settings for one tenant project (e.g. NSG).

    A tenant is usable only when both the base URL and the anon credential
    are present; the service credential is optional.
    """

    code: str
    base_url: str = ""
    anon_credential: str = ""
    service_credential: str | None = None
    quota_bytes: int | None = None

    model_config = {"frozen": True}

    @property
    def is_usable(self) -> bool:
        return bool(self.base_url and self.anon_credential)

    def credential_for(self, privilege: Privilege) -> str | None:
        if privilege is Privilege.SERVICE:
            return self.service_credential or None
        return self.anon_credential or None

    def supports(self, privilege: Privilege) -> bool:
        """True when both the URL and the credential for ``privilege`` are set."""
        return bool(self.base_url and self.credential_for(privilege))


class BucketRef(BaseModel):
    """A bucket name paired with the tenant that owns it."""

    bucket_name: str
    tenant_code: str

    model_config = {"frozen": True}

    @staticmethod
    def infer_tenant_code(bucket_name: str, separator: str = "-") -> str:
        """Tenant code encoded in a bucket name: ``"nsg-LMS"`` -> ``"NSG"``."""
        return bucket_name.strip().split(separator, 1)[0].strip().upper()


class StorageEntry(BaseModel):
    """One listed object, or an implicit folder, under a storage path.

    ``is_file`` is True iff the backend returned metadata for the entry.
    ``size_bytes`` is only set for files whose metadata carries a size.
    """

    name: str
    path: str
    is_file: bool
    size_bytes: int | None = None
    id: str | None = None
    metadata: dict[str, Any] | None = None
    updated_at: str | None = None
    created_at: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def from_backend(cls, raw: dict[str, Any], parent_path: str) -> "StorageEntry":
        """Build an entry from one item of a storage list response."""
        metadata = raw.get("metadata")
        size = metadata.get("size") if isinstance(metadata, dict) else None
        if isinstance(size, bool) or not isinstance(size, (int, float)):
            size = None

        return cls(
            name=raw["name"],
            path=join_path(parent_path, raw["name"]),
            is_file=metadata is not None,
            size_bytes=int(size) if size is not None else None,
            id=raw.get("id"),
            metadata=metadata if isinstance(metadata, dict) else None,
            updated_at=raw.get("updated_at"),
            created_at=raw.get("created_at"),
        )

    def to_api(self) -> dict[str, Any]:
        """Shape used by the browse endpoints."""
        return {
            "name": self.name,
            "id": self.id,
            "path": self.path,
            "isFile": self.is_file,
            "sizeBytes": self.size_bytes,
            "metadata": self.metadata,
            "updated_at": self.updated_at,
            "created_at": self.created_at,
        }


class ListingResult(BaseModel):
    """Materialized recursive listing."""

    entries: list[StorageEntry] = Field(default_factory=list)
    complete: bool = True

    model_config = {"frozen": True}


class DeletionPlan(BaseModel):
    """Object paths to remove and the bucket name that produced them."""

    paths: list[str] = Field(default_factory=list)
    used_bucket: str

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return not self.paths


class UsageReport(BaseModel):
    """Occupied bytes of a bucket and which credential tier measured them."""

    bucket: str
    tenant_code: str
    used_bytes: int
    total_bytes: int
    source: Privilege
    complete: bool
    file_count: int = 0

    model_config = {"frozen": True}


class RemovalOutcome(BaseModel):
    """Result of a successful deletion request."""

    deleted: int
    used_bucket: str
    fallback_used: str | None = None
    examples: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}
