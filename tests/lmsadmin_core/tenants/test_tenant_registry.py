"""Unit tests for the tenant registry and tenant inference."""

import pytest

from lmsadmin_core.config import Settings
from lmsadmin_core.domain.models import Privilege
from lmsadmin_core.tenants import TenantRegistry
from lmsadmin_core.tenants.registry import GIB


@pytest.fixture
def env():
    return {
        "SUPABASE_URL_NSG": "https://nsg.example.co",
        "SUPABASE_ANON_KEY_NSG": "anon-nsg",
        "SUPABASE_SERVICE_ROLE_KEY_NSG": "service-nsg",
        "SUPABASE_URL_RMW": "https://rmw.example.co",
        "SUPABASE_ANON_KEY_RMW": "anon-rmw",
        "BUCKET_QUOTA_GB_RMW": "5",
        "BUCKET_QUOTA_GB": "2",
        "SUPABASE_URL": "https://console.example.co",
        "SUPABASE_SERVICE_ROLE_KEY": "service-console",
    }


class TestFromEnv:
    """Tests for TenantRegistry.from_env."""

    def test_keeps_enumeration_order(self, env):
        registry = TenantRegistry.from_env(env)

        assert registry.codes == ("NSG", "RMW", "DQW")
        assert [t.code for t in registry] == ["NSG", "RMW", "DQW"]
        assert len(registry) == 3

    def test_reads_credentials(self, env):
        nsg = TenantRegistry.from_env(env).get("nsg")

        assert nsg.base_url == "https://nsg.example.co"
        assert nsg.credential_for(Privilege.ANON) == "anon-nsg"
        assert nsg.credential_for(Privilege.SERVICE) == "service-nsg"

    def test_missing_service_key_is_none(self, env):
        rmw = TenantRegistry.from_env(env).get("RMW")

        assert rmw.service_credential is None
        assert rmw.is_usable is True
        assert rmw.supports(Privilege.SERVICE) is False

    def test_quota(self, env):
        registry = TenantRegistry.from_env(env)

        assert registry.quota_bytes_for("RMW") == 5 * GIB
        assert registry.quota_bytes_for("NSG") == 2 * GIB

    def test_default_project(self, env):
        registry = TenantRegistry.from_env(env)

        assert registry.default_project.base_url == "https://console.example.co"
        assert registry.default_project.supports(Privilege.SERVICE)

    def test_no_default_project(self):
        assert TenantRegistry.from_env({}).default_project is None

    def test_blank_values_are_missing(self):
        registry = TenantRegistry.from_env({"SUPABASE_URL_NSG": "  ", "SUPABASE_ANON_KEY_NSG": "k"})

        assert registry.get("NSG").is_usable is False


class TestFromSettings:
    """Tests for TenantRegistry.from_settings."""

    def test_builds_from_settings(self):
        settings = Settings(
            SUPABASE_URL_NSG="https://nsg.example.co",
            SUPABASE_ANON_KEY_NSG="anon",
            BUCKET_QUOTA_GB=3,
        )

        registry = TenantRegistry.from_settings(settings)

        assert registry.get("NSG").is_usable
        assert registry.default_quota_bytes == 3 * GIB

    def test_extra_tenant_codes_read_from_environment(self):
        settings = Settings(
            TENANT_CODES=["NSG", "RMW", "DQW", "KLM"],
            SUPABASE_URL_NSG="https://nsg.example.co",
            SUPABASE_ANON_KEY_NSG="anon",
        )
        environ = {
            "SUPABASE_URL_KLM": "https://klm.example.co",
            "SUPABASE_ANON_KEY_KLM": "anon-klm",
            "SUPABASE_URL_NSG": "https://stale.example.co",
        }

        registry = TenantRegistry.from_settings(settings, environ=environ)

        assert registry.codes[-1] == "KLM"
        assert registry.get("KLM").is_usable
        assert registry.get("NSG").base_url == "https://nsg.example.co"


class TestConventions:
    """Bucket naming and tenant inference."""

    def test_bucket_for(self):
        assert TenantRegistry.from_env({}).bucket_for("nsg") == "NSG-LMS"

    @pytest.mark.parametrize(
        "bucket,code",
        [("NSG-LMS", "NSG"), ("nsg-lms", "NSG"), ("Rmw-archive-2024", "RMW"), ("dqw", "DQW")],
    )
    def test_tenant_inference(self, bucket, code):
        assert TenantRegistry.from_env({}).tenant_code_for_bucket(bucket) == code

    def test_inference_is_only_a_convention(self):
        """A bucket that does not follow the convention maps to an unknown tenant."""
        registry = TenantRegistry.from_env({})

        assert registry.get(registry.tenant_code_for_bucket("course-media")) is None


class TestMissingConfigKeys:
    """Remediation hints name the exact keys to set."""

    def test_missing_service_key(self, env):
        registry = TenantRegistry.from_env(env)

        assert registry.missing_config_keys("RMW", Privilege.SERVICE) == ["SUPABASE_SERVICE_ROLE_KEY_RMW"]

    def test_missing_everything(self, env):
        registry = TenantRegistry.from_env(env)

        assert registry.missing_config_keys("DQW", Privilege.ANON) == [
            "SUPABASE_URL_DQW",
            "SUPABASE_ANON_KEY_DQW",
        ]

    def test_default_project_keys(self):
        registry = TenantRegistry.from_env({})

        assert registry.missing_config_keys("DEFAULT", Privilege.SERVICE) == [
            "SUPABASE_URL",
            "SUPABASE_SERVICE_ROLE_KEY",
        ]
