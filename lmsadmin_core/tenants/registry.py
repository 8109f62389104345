"""
Immutable registry of tenant projects.

The registry is built once at process start, either from Settings or from
any environment-style mapping, and then injected into the services that
need it. Nothing reads tenant configuration from process state afterwards.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from lmsadmin_core.domain.models import BucketRef, Privilege, TenantConfig

GIB = 1024 * 1024 * 1024

DEFAULT_TENANT_CODES = ("NSG", "RMW", "DQW")
DEFAULT_PROJECT_CODE = "DEFAULT"


def url_key(code: str) -> str:
    return f"SUPABASE_URL_{code}"


def anon_key(code: str) -> str:
    return f"SUPABASE_ANON_KEY_{code}"


def service_key(code: str) -> str:
    return f"SUPABASE_SERVICE_ROLE_KEY_{code}"


def quota_key(code: str) -> str:
    return f"BUCKET_QUOTA_GB_{code}"


def _text(env: Mapping[str, Any], key: str) -> str:
    value = env.get(key)
    return str(value).strip() if value else ""


def _gigabytes(value: Any) -> int | None:
    if value in (None, ""):
        return None
    return int(float(value) * GIB)


class TenantRegistry:
    """Tenant configurations keyed by code, in a fixed enumeration order."""

    def __init__(
        self,
        tenants: Sequence[TenantConfig],
        default_project: TenantConfig | None = None,
        bucket_suffix: str = "LMS",
        separator: str = "-",
        default_quota_bytes: int = GIB,
    ):
        self._tenants = {t.code.upper(): t for t in tenants}
        self._order = tuple(t.code.upper() for t in tenants)
        self.default_project = default_project
        self.bucket_suffix = bucket_suffix
        self.separator = separator
        self.default_quota_bytes = default_quota_bytes

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, Any],
        codes: Sequence[str] = DEFAULT_TENANT_CODES,
        bucket_suffix: str = "LMS",
        separator: str = "-",
    ) -> "TenantRegistry":
        """
        Build a registry from environment-style keys.

        For each code, reads SUPABASE_URL_<CODE>, SUPABASE_ANON_KEY_<CODE>,
        SUPABASE_SERVICE_ROLE_KEY_<CODE> and BUCKET_QUOTA_GB_<CODE>. The
        default identity project comes from SUPABASE_URL and
        SUPABASE_SERVICE_ROLE_KEY.

        Args:
            env: Mapping of configuration keys to values.
            codes: Tenant codes, in enumeration order.
            bucket_suffix: Suffix of the conventional bucket name.
            separator: Separator between tenant code and suffix.

        Returns:
            A populated TenantRegistry.
        """
        default_quota = _gigabytes(env.get("BUCKET_QUOTA_GB")) or GIB

        tenants = []
        for raw_code in codes:
            code = raw_code.strip().upper()
            tenants.append(
                TenantConfig(
                    code=code,
                    base_url=_text(env, url_key(code)),
                    anon_credential=_text(env, anon_key(code)),
                    service_credential=_text(env, service_key(code)) or None,
                    quota_bytes=_gigabytes(env.get(quota_key(code))),
                )
            )

        default_project = None
        default_url = _text(env, "SUPABASE_URL")
        default_service = _text(env, "SUPABASE_SERVICE_ROLE_KEY")
        if default_url or default_service:
            default_project = TenantConfig(
                code=DEFAULT_PROJECT_CODE,
                base_url=default_url,
                service_credential=default_service or None,
            )

        return cls(
            tenants,
            default_project=default_project,
            bucket_suffix=bucket_suffix,
            separator=separator,
            default_quota_bytes=default_quota,
        )

    @classmethod
    def from_settings(
        cls, settings, environ: Mapping[str, Any] | None = None
    ) -> "TenantRegistry":
        """
        Build the registry from the process Settings object.

        Settings only declares keys for the built-in tenant codes; keys of
        any other code listed in TENANT_CODES are read from ``environ``
        (the process environment by default). Non-empty Settings values win.
        """
        env = dict(os.environ if environ is None else environ)
        env.update({key: value for key, value in settings.model_dump().items() if value not in (None, "")})
        return cls.from_env(
            env,
            codes=settings.TENANT_CODES,
            bucket_suffix=settings.BUCKET_SUFFIX,
            separator=settings.BUCKET_SEPARATOR,
        )

    def __iter__(self) -> Iterator[TenantConfig]:
        return (self._tenants[code] for code in self._order)

    def __len__(self) -> int:
        return len(self._order)

    @property
    def codes(self) -> tuple[str, ...]:
        return self._order

    def get(self, code: str) -> TenantConfig | None:
        return self._tenants.get((code or "").strip().upper())

    def bucket_for(self, code: str) -> str:
        """Conventional bucket of a tenant: ``NSG`` -> ``NSG-LMS``."""
        return f"{code.strip().upper()}{self.separator}{self.bucket_suffix}"

    def tenant_code_for_bucket(self, bucket_name: str) -> str:
        return BucketRef.infer_tenant_code(bucket_name, self.separator)

    def quota_bytes_for(self, code: str) -> int:
        tenant = self.get(code)
        if tenant is not None and tenant.quota_bytes is not None:
            return tenant.quota_bytes
        return self.default_quota_bytes

    def missing_config_keys(self, code: str, privilege: Privilege) -> list[str]:
        """Configuration keys that must be set before ``code`` supports ``privilege``."""
        if code == DEFAULT_PROJECT_CODE:
            tenant = self.default_project or TenantConfig(code=code)
            keys = ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY")
        else:
            tenant = self.get(code) or TenantConfig(code=code)
            keys = (
                url_key(code),
                service_key(code) if privilege is Privilege.SERVICE else anon_key(code),
            )

        missing = []
        if not tenant.base_url:
            missing.append(keys[0])
        if not tenant.credential_for(privilege):
            missing.append(keys[1])
        return missing
