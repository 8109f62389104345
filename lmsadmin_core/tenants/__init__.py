"""
Tenant configuration and credential resolution.
"""

from .client import TenantClient
from .registry import TenantRegistry
from .resolver import TenantResolver

__all__ = ["TenantClient", "TenantRegistry", "TenantResolver"]
