"""
Client handle for one (tenant, privilege) pair.
"""

from __future__ import annotations

import httpx

from lmsadmin_core.domain.models import Privilege, TenantConfig
from lmsadmin_core.infrastructure.supabase import SupabaseAuthAdminClient, SupabaseStorageClient
from lmsadmin_core.runtime import ServiceHttpClient


class TenantClient:
    """
    Thin handle over a tenant project reached with one credential tier.

    The underlying HTTP connection pool is only opened on first use, so
    building a handle is cheap.

    Usage:
        client = TenantClient(tenant, Privilege.SERVICE)
        page = await client.storage.list_objects("NSG-LMS", "", limit=1000)
        await client.aclose()
    """

    def __init__(
        self,
        tenant: TenantConfig,
        privilege: Privilege,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        credential = tenant.credential_for(privilege)
        if not tenant.base_url or not credential:
            raise ValueError(f"Tenant {tenant.code} has no {privilege.value} credential")

        self.tenant = tenant
        self.privilege = privilege
        self._http = ServiceHttpClient(
            base_url=tenant.base_url,
            api_key=credential,
            timeout=timeout,
            transport=transport,
        )
        self.storage = SupabaseStorageClient(self._http)
        self.auth = SupabaseAuthAdminClient(self._http)

    @property
    def code(self) -> str:
        return self.tenant.code

    def __repr__(self) -> str:
        return f"TenantClient(code={self.code!r}, privilege={self.privilege.value!r})"

    async def aclose(self) -> None:
        await self._http.close()
