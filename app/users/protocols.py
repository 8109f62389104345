from __future__ import annotations
"""
Protocols for the users module.

Account administration only needs these calls from a project's identity
admin API, so tests can drive the services with in-memory doubles.
"""

from typing import Any, Protocol, runtime_checkable

from lmsadmin_core.runtime import RunContext


@runtime_checkable
class IdentityAdmin(Protocol):
    """Identity admin API of one project, reached with the service credential."""

    async def create_user(
        self,
        email: str,
        password: str,
        user_metadata: dict[str, Any] | None = None,
        email_confirm: bool = True,
        context: RunContext | None = None,
    ) -> dict[str, Any]:
        """Create one user and return it."""
        ...

    async def list_users(
        self,
        page: int = 1,
        per_page: int = 50,
        context: RunContext | None = None,
    ) -> list[dict[str, Any]]:
        """
        List one page of users.

        Args:
            page: 1-based page number.
            per_page: Users per page.
            context: Optional correlation context.

        Returns:
            The users of the page; shorter than ``per_page`` on the last page.
        """
        ...

    async def update_user(
        self,
        user_id: str,
        attributes: dict[str, Any],
        context: RunContext | None = None,
    ) -> dict[str, Any]:
        """Update attributes of one user and return it."""
        ...
