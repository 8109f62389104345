"""
Supabase REST connectors for the admin console.

Each tenant project exposes object storage under ``/storage/v1`` and the
identity admin API under ``/auth/v1/admin``. These thin wrappers speak those
endpoints over a shared ServiceHttpClient and return decoded JSON.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from lmsadmin_core.runtime import BackendError, ErrorCode, RunContext, ServiceHttpClient


def _object_url(bucket: str, path: str | None = None) -> str:
    url = f"/storage/v1/object/{quote(bucket, safe='')}"
    if path:
        url = f"{url}/{quote(path, safe='/')}"
    return url


class SupabaseStorageClient:
    """Object storage API of one project.

    Usage:
        storage = SupabaseStorageClient(http)
        page = await storage.list_objects("NSG-LMS", "reports", limit=1000)
    """

    def __init__(self, http: ServiceHttpClient):
        self._http = http

    async def list_objects(
        self,
        bucket: str,
        prefix: str,
        limit: int,
        offset: int = 0,
        context: RunContext | None = None,
    ) -> list[dict[str, Any]]:
        """
        List one page of the entries directly under ``prefix``.

        Entries are sorted by name ascending so offsets are stable between
        pages. Folders come back with ``metadata: null``.

        Args:
            bucket: Bucket name.
            prefix: Directory path inside the bucket ("" for the root).
            limit: Page size.
            offset: Number of entries to skip.
            context: Optional correlation context.

        Returns:
            The raw entries of the page.
        """
        response = await self._http.post(
            f"/storage/v1/object/list/{quote(bucket, safe='')}",
            context,
            json={
                "prefix": prefix,
                "limit": limit,
                "offset": offset,
                "sortBy": {"column": "name", "order": "asc"},
            },
        )
        data = response.json()
        if not isinstance(data, list):
            raise BackendError(
                code=ErrorCode.SERVICE_UNAVAILABLE,
                message_safe="Unexpected listing response from storage backend",
                status_code=response.status_code,
            )
        return data

    async def remove_objects(
        self,
        bucket: str,
        paths: list[str],
        context: RunContext | None = None,
    ) -> list[dict[str, Any]]:
        """Remove the given object paths in one bulk request."""
        response = await self._http.delete(
            _object_url(bucket),
            context,
            json={"prefixes": paths},
        )
        data = response.json() if response.content else []
        return data if isinstance(data, list) else []

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
        """Upload ``content`` to ``bucket/path``."""
        response = await self._http.post(
            _object_url(bucket, path),
            context,
            content=content,
            headers={
                "content-type": content_type,
                "cache-control": f"max-age={cache_control}",
                "x-upsert": "true" if upsert else "false",
            },
        )
        return response.json() if response.content else {}


class SupabaseAuthAdminClient:
    """Identity admin API of one project (requires the service credential)."""

    def __init__(self, http: ServiceHttpClient):
        self._http = http

    async def create_user(
        self,
        email: str,
        password: str,
        user_metadata: dict[str, Any] | None = None,
        email_confirm: bool = True,
        context: RunContext | None = None,
    ) -> dict[str, Any]:
        response = await self._http.post(
            "/auth/v1/admin/users",
            context,
            json={
                "email": email,
                "password": password,
                "user_metadata": user_metadata or {},
                "email_confirm": email_confirm,
            },
        )
        return response.json()

    async def list_users(
        self,
        page: int = 1,
        per_page: int = 50,
        context: RunContext | None = None,
    ) -> list[dict[str, Any]]:
        response = await self._http.get(
            "/auth/v1/admin/users",
            context,
            params={"page": page, "per_page": per_page},
        )
        body = response.json()
        users = body.get("users") if isinstance(body, dict) else body
        return users or []

    async def update_user(
        self,
        user_id: str,
        attributes: dict[str, Any],
        context: RunContext | None = None,
    ) -> dict[str, Any]:
        response = await self._http.put(
            f"/auth/v1/admin/users/{quote(user_id, safe='')}",
            context,
            json=attributes,
        )
        return response.json()
