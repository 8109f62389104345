"""
Tenant credential resolution.

Maps a bucket name or an explicit account code to the tenant project that
owns it and hands out a client for the requested credential tier.
"""

from __future__ import annotations

import httpx
from loguru import logger

from lmsadmin_core.domain.exceptions import TenantNotConfigured
from lmsadmin_core.domain.models import Privilege

from .client import TenantClient
from .registry import DEFAULT_PROJECT_CODE, TenantRegistry


class TenantResolver:
    """
    Resolve buckets and account codes to tenant clients.

    Resolution order:
    1. The explicit account code, when one is supplied.
    2. The tenant code encoded in the bucket name (``NSG-LMS`` -> ``NSG``).
    3. TenantNotConfigured when that tenant lacks the URL or the credential
       for the requested tier. Another tenant is never substituted.

    Client handles are cached per (tenant, privilege) for the process
    lifetime; the registry is immutable so the cache never goes stale.
    """

    def __init__(
        self,
        registry: TenantRegistry,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.registry = registry
        self._timeout = timeout
        self._transport = transport
        self._clients: dict[tuple[str, Privilege], TenantClient] = {}

    def tenant_code(self, bucket_or_account: str | None, account: str | None = None) -> str:
        """Tenant code for a request: explicit account first, then bucket prefix."""
        explicit = (account or "").strip().upper()
        if explicit:
            return explicit
        return self.registry.tenant_code_for_bucket(bucket_or_account or "")

    def resolve(
        self,
        bucket_or_account: str | None,
        privilege: Privilege,
        account: str | None = None,
    ) -> TenantClient:
        """
        Get the client for the tenant owning a bucket (or named by an account).

        Args:
            bucket_or_account: Bucket name or account code.
            privilege: Credential tier required.
            account: Optional explicit account code; wins over the bucket prefix.

        Returns:
            TenantClient for the resolved tenant and tier.

        Raises:
            TenantNotConfigured: If the tenant lacks the URL or credential.
        """
        return self.client_for(self.tenant_code(bucket_or_account, account), privilege)

    def client_for(self, code: str, privilege: Privilege) -> TenantClient:
        """Get the cached client for a known tenant code and tier."""
        code = (code or "").strip().upper()
        key = (code, privilege)
        client = self._clients.get(key)
        if client is not None:
            return client

        tenant = self.registry.default_project if code == DEFAULT_PROJECT_CODE else self.registry.get(code)
        if tenant is None or not tenant.supports(privilege):
            missing = self.registry.missing_config_keys(code, privilege)
            logger.warning(f"Tenant {code or '(unknown)'} missing {privilege.value} configuration: {missing}")
            raise TenantNotConfigured(code, missing, privilege.value)

        client = TenantClient(tenant, privilege, timeout=self._timeout, transport=self._transport)
        self._clients[key] = client
        return client

    def lowest_privilege(self, code: str) -> Privilege | None:
        """The least privileged tier configured for ``code``, if any."""
        tenant = self.registry.get(code)
        if tenant is None:
            return None
        for privilege in (Privilege.ANON, Privilege.SERVICE):
            if tenant.supports(privilege):
                return privilege
        return None

    def supports(self, code: str, privilege: Privilege) -> bool:
        tenant = self.registry.get(code)
        return tenant is not None and tenant.supports(privilege)

    def resolve_identity(self, account: str | None = None) -> TenantClient:
        """
        Service-tier client for account administration.

        Uses the named tenant when ``account`` is given, otherwise the
        default project configured by SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY.
        """
        code = (account or "").strip().upper() or DEFAULT_PROJECT_CODE
        return self.client_for(code, Privilege.SERVICE)

    def bucket_for_account(self, account: str) -> str:
        return self.registry.bucket_for(account)

    async def aclose(self) -> None:
        """Close every cached client."""
        clients, self._clients = list(self._clients.values()), {}
        for client in clients:
            await client.aclose()
