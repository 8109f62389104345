"""
Single-account administration: password reset and role change.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from app.users.protocols import IdentityAdmin
from lmsadmin_core.domain.exceptions import UserNotFound, ValidationError
from lmsadmin_core.runtime import RunContext

USERS_PER_PAGE = 200


class AccountService:
    """Administrative changes to existing accounts of one identity project."""

    def __init__(self, identity: IdentityAdmin, per_page: int = USERS_PER_PAGE):
        self.identity = identity
        self.per_page = per_page

    async def find_by_email(self, email: str, context: RunContext | None = None) -> dict[str, Any]:
        """
        Page through the admin user listing until ``email`` is found.

        Raises:
            UserNotFound: If no page contains the address.
        """
        target = email.strip().lower()
        page = 1
        while True:
            users = await self.identity.list_users(page=page, per_page=self.per_page, context=context)
            for user in users:
                if (user.get("email") or "").lower() == target:
                    return user
            if len(users) < self.per_page:
                raise UserNotFound(email)
            page += 1

    async def reset_password(
        self,
        email: str | None,
        new_password: str | None,
        context: RunContext | None = None,
    ) -> dict[str, Any]:
        """Set a new password for the account with ``email`` and confirm the address."""
        if not email or not new_password:
            raise ValidationError("email and newPassword are required")

        user = await self.find_by_email(email, context)
        prefix = context.log_prefix if context else ""
        logger.info(f"{prefix} Resetting password for user {user.get('id')}")
        return await self.identity.update_user(
            user["id"],
            {"password": new_password, "email_confirm": True},
            context=context,
        )

    async def update_role(
        self,
        user_id: str | None,
        role: str | None,
        context: RunContext | None = None,
    ) -> dict[str, Any]:
        """Store ``role`` in the user's metadata."""
        if not user_id or not role:
            raise ValidationError("userId and role are required")

        prefix = context.log_prefix if context else ""
        logger.info(f"{prefix} Setting role of user {user_id} to {role}")
        return await self.identity.update_user(user_id, {"user_metadata": {"role": role}}, context=context)
