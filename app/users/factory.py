"""
Users module factory.

Account administration runs against the default identity project unless
the request names a tenant account, so routes get a lookup function
rather than a fixed client.
"""

from __future__ import annotations

from collections.abc import Callable

from app.storage.factory import get_resolver
from app.users.protocols import IdentityAdmin

IdentityLookup = Callable[[str | None], IdentityAdmin]


def get_identity_lookup() -> IdentityLookup:
    """Get a function mapping an optional account code to its identity admin API."""
    resolver = get_resolver()

    def lookup(account: str | None = None) -> IdentityAdmin:
        return resolver.resolve_identity(account).auth

    return lookup
