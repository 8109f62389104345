"""
Pydantic schemas for the users module.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class BulkInsertRequest(BaseModel):
    """Rows parsed from an uploaded spreadsheet."""

    rows: list[dict[str, Any]] = Field(default_factory=list)
    account: Optional[str] = None


class BulkInsertResponse(BaseModel):
    message: str
    results: list[dict[str, Any]]


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    new_password: Optional[str] = Field(None, alias="newPassword")
    account: Optional[str] = None


class ResetPasswordResponse(BaseModel):
    success: bool = True
    message: str
    user: dict[str, Any]


class UpdateRoleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    role: Optional[str] = None
    account: Optional[str] = None


class UpdateRoleResponse(BaseModel):
    success: bool = True
    user: dict[str, Any]
