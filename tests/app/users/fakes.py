from __future__ import annotations
"""
Fake implementations of users protocols for testing.
"""

import asyncio
from typing import Any

from app.users.protocols import IdentityAdmin
from lmsadmin_core.runtime import BackendError, ErrorCode


class FakeIdentityAdmin(IdentityAdmin):
    """In-memory identity project; emails listed in ``reject`` fail on create."""

    def __init__(self, users: list[dict[str, Any]] | None = None, reject: set[str] | None = None):
        self.users = list(users or [])
        self.reject = reject or set()
        self.created: list[dict[str, Any]] = []
        self.updates: list[tuple[str, dict[str, Any]]] = []
        self.list_pages: list[int] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def create_user(self, email, password, user_metadata=None, email_confirm=True, context=None):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if email in self.reject:
                raise BackendError(
                    ErrorCode.INVALID_INPUT,
                    "A user with this email address has already been registered",
                    status_code=422,
                )
            user = {
                "id": f"user-{len(self.users) + 1}",
                "email": email,
                "user_metadata": dict(user_metadata or {}),
                "email_confirmed": email_confirm,
            }
            self.users.append(user)
            self.created.append({"email": email, "password": password, "user_metadata": user_metadata})
            return user
        finally:
            self.in_flight -= 1

    async def list_users(self, page=1, per_page=50, context=None):
        self.list_pages.append(page)
        start = (page - 1) * per_page
        return self.users[start:start + per_page]

    async def update_user(self, user_id, attributes, context=None):
        self.updates.append((user_id, attributes))
        for user in self.users:
            if user["id"] == user_id:
                if "user_metadata" in attributes:
                    user["user_metadata"] = {**user.get("user_metadata", {}), **attributes["user_metadata"]}
                return user
        raise BackendError(ErrorCode.NOT_FOUND, "User not found", status_code=404)
