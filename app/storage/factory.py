"""
Storage module factory.

Builds the tenant registry and resolver once per process and wires the
storage services on top of them. Routes receive these through FastAPI
``Depends`` so tests can swap them with ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from app.storage.services.aggregation import UsageService
from app.storage.services.browse import BrowseService
from app.storage.services.deletion import DeletionPlanner, DeletionService
from app.storage.services.upload import UploadService
from lmsadmin_core.config import Settings, settings
from lmsadmin_core.tenants import TenantRegistry, TenantResolver


def get_settings() -> Settings:
    """Get the process settings."""
    return settings


@lru_cache()
def get_registry() -> TenantRegistry:
    """Get the immutable tenant registry built from settings."""
    return TenantRegistry.from_settings(get_settings())


@lru_cache()
def get_resolver() -> TenantResolver:
    """Get the process-wide tenant resolver (caches client handles)."""
    return TenantResolver(get_registry(), timeout=get_settings().HTTP_TIMEOUT_SECONDS)


def get_usage_service() -> UsageService:
    return UsageService(get_resolver(), page_size=get_settings().STORAGE_PAGE_SIZE)


def get_deletion_service() -> DeletionService:
    planner = DeletionPlanner(page_size=get_settings().STORAGE_PAGE_SIZE)
    return DeletionService(get_resolver(), planner)


def get_browse_service() -> BrowseService:
    return BrowseService(get_resolver(), page_size=get_settings().STORAGE_PAGE_SIZE)


def get_upload_service() -> UploadService:
    return UploadService(get_resolver())
