"""
Unit tests for directory browsing and file upload.
"""

import pytest

from app.storage.services.browse import BrowseService
from app.storage.services.upload import UploadService
from lmsadmin_core.domain.exceptions import TenantNotConfigured, ValidationError
from lmsadmin_core.domain.models import Privilege
from lmsadmin_core.runtime import BackendError
from lmsadmin_core.tenants import TenantRegistry
from tests.app.storage.fakes import FakeObjectStorage, FakeTenantResolver, tenant_env


@pytest.fixture
def storage():
    return FakeObjectStorage({"NSG-LMS": {"a.txt": 1, "docs/b.txt": 2}})


def _resolver(storage, **env_flags):
    registry = TenantRegistry.from_env(tenant_env("NSG", **env_flags))
    return FakeTenantResolver(
        registry,
        {("NSG", Privilege.ANON): storage, ("NSG", Privilege.SERVICE): storage},
    )


class TestBrowseFiles:
    """Tests for BrowseService.files."""

    @pytest.mark.asyncio
    async def test_prefers_service_credential(self, storage):
        resolver = _resolver(storage)

        entries = await BrowseService(resolver).files(bucket="NSG-LMS")

        assert [e.name for e in entries] == ["a.txt", "docs"]
        assert resolver.resolved == [("NSG", Privilege.SERVICE)]

    @pytest.mark.asyncio
    async def test_uses_anon_without_service_key(self, storage):
        resolver = _resolver(storage, service=False)

        await BrowseService(resolver).files(bucket="NSG-LMS")

        assert resolver.resolved == [("NSG", Privilege.ANON)]

    @pytest.mark.asyncio
    async def test_account_selects_conventional_bucket(self, storage):
        resolver = _resolver(storage)

        entries = await BrowseService(resolver).files(account="nsg", path="docs")

        assert [e.path for e in entries] == ["docs/b.txt"]

    @pytest.mark.asyncio
    async def test_requires_bucket_or_account(self, storage):
        with pytest.raises(ValidationError):
            await BrowseService(_resolver(storage)).files()

    @pytest.mark.asyncio
    async def test_unconfigured_tenant(self, storage):
        with pytest.raises(TenantNotConfigured):
            await BrowseService(_resolver(storage)).files(bucket="RMW-LMS")


class TestDebugListing:
    """Tests for BrowseService.debug_listing."""

    @pytest.mark.asyncio
    async def test_prefers_anon_credential(self, storage):
        resolver = _resolver(storage)

        entries, source = await BrowseService(resolver).debug_listing("NSG-LMS", limit=1)

        assert source is Privilege.ANON
        assert len(entries) == 1

    @pytest.mark.asyncio
    async def test_uses_service_without_anon_key(self, storage):
        _, source = await BrowseService(_resolver(storage, anon=False)).debug_listing("NSG-LMS")

        assert source is Privilege.SERVICE


class TestUpload:
    """Tests for UploadService.upload."""

    @pytest.mark.asyncio
    async def test_uploads_with_anon_credential(self, storage):
        resolver = _resolver(storage)

        stored = await UploadService(resolver).upload(
            "NSG-LMS", "c.txt", b"hello", content_type="text/plain", path="/docs/c.txt"
        )

        assert stored == {"bucket": "NSG-LMS", "path": "docs/c.txt"}
        assert resolver.resolved == [("NSG", Privilege.ANON)]
        call = storage.upload_calls[0]
        assert call["upsert"] is False
        assert call["cache_control"] == "3600"
        assert call["content_type"] == "text/plain"

    @pytest.mark.asyncio
    async def test_path_defaults_to_file_name(self, storage):
        stored = await UploadService(_resolver(storage)).upload("NSG-LMS", "report.pdf", b"%PDF")

        assert stored["path"] == "report.pdf"
        assert storage.upload_calls[0]["content_type"] == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_account_overrides_bucket(self, storage):
        stored = await UploadService(_resolver(storage)).upload(
            "whatever", "x.txt", b"x", account="nsg"
        )

        assert stored["bucket"] == "NSG-LMS"

    @pytest.mark.asyncio
    async def test_existing_object_is_not_overwritten(self, storage):
        with pytest.raises(BackendError) as exc_info:
            await UploadService(_resolver(storage)).upload("NSG-LMS", "a.txt", b"new")

        assert exc_info.value.status_code == 409
        assert storage.buckets["NSG-LMS"]["a.txt"] == 1

    @pytest.mark.asyncio
    async def test_requires_path_or_file_name(self, storage):
        resolver = _resolver(storage)

        with pytest.raises(ValidationError):
            await UploadService(resolver).upload("NSG-LMS", None, b"x", path="/")

        assert resolver.resolved == []
