"""
Bulk user import.

Every row becomes one create-user request. Requests run concurrently and
each row settles on its own: one failing row never cancels the others.
"""

from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger
from pydantic import BaseModel

from app.users.protocols import IdentityAdmin
from lmsadmin_core.runtime import RunContext

DISPLAY_NAME_FIELDS = ("display_name", "employee name", "employee_name", "name")
ADMIN_ROLE = "admin"
DEFAULT_ROLE = "user"


class ImportRow(BaseModel):
    """A spreadsheet row normalized into a user to create."""

    email: str
    password: str
    display_name: str
    role: str

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "ImportRow":
        display_name = ""
        for field in DISPLAY_NAME_FIELDS:
            value = _text(raw.get(field))
            if value:
                display_name = value
                break

        role = _text(raw.get("role")).lower()
        return cls(
            email=_text(raw.get("email")),
            password=_text(raw.get("password")),
            display_name=display_name,
            role=role if role == ADMIN_ROLE else DEFAULT_ROLE,
        )


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


class BulkImportService:
    """Create users from uploaded rows against one identity project."""

    def __init__(self, identity: IdentityAdmin):
        self.identity = identity

    async def _import_row(self, raw: dict[str, Any], context: RunContext | None) -> dict[str, Any]:
        row = ImportRow.from_raw(raw)
        if not row.email or not row.password:
            return {"success": False, "error": "email or password missing", "row": raw}

        user = await self.identity.create_user(
            row.email,
            row.password,
            user_metadata={"display_name": row.display_name, "role": row.role},
            email_confirm=True,
            context=context,
        )
        return {"success": True, "row": raw, "user": user}

    async def import_rows(
        self,
        rows: list[dict[str, Any]],
        context: RunContext | None = None,
    ) -> list[dict[str, Any]]:
        """
        Create one user per row, concurrently.

        Args:
            rows: Raw rows with email, password, role and a display name
                under any of the accepted column names.
            context: Optional correlation context.

        Returns:
            One ``{success, error?, row, user?}`` result per row, in input order.
        """
        settled = await asyncio.gather(
            *(self._import_row(raw, context) for raw in rows),
            return_exceptions=True,
        )

        results = []
        for raw, outcome in zip(rows, settled):
            if isinstance(outcome, Exception):
                message = getattr(outcome, "message_safe", None) or str(outcome)
                results.append({"success": False, "error": message, "row": raw})
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append(outcome)

        created = sum(1 for r in results if r["success"])
        prefix = context.log_prefix if context else ""
        logger.info(f"{prefix} Bulk import finished: {created}/{len(rows)} users created")
        return results
