"""
Users module routes.

Account administration for the console:
- Bulk user import from spreadsheet rows
- Password reset by email
- Role change
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.users.factory import IdentityLookup, get_identity_lookup
from app.users.schemas import (
    BulkInsertRequest,
    BulkInsertResponse,
    ResetPasswordRequest,
    ResetPasswordResponse,
    UpdateRoleRequest,
    UpdateRoleResponse,
)
from app.users.services.accounts import AccountService
from app.users.services.bulk_import import BulkImportService
from lmsadmin_core.runtime import RunContext

router = APIRouter(tags=["users"])


@router.post("/bulk-insert", response_model=BulkInsertResponse, summary="Create users from rows")
async def bulk_insert(
    request: BulkInsertRequest,
    identity_for: IdentityLookup = Depends(get_identity_lookup),
):
    """
    Create one user per row.

    Rows are processed concurrently and reported individually; a failing
    row does not stop the others.
    """
    identity = identity_for(request.account)
    if not request.rows:
        return BulkInsertResponse(message="No rows provided", results=[])

    results = await BulkImportService(identity).import_rows(request.rows, context=RunContext.new())
    return BulkInsertResponse(message="Bulk insert finished", results=results)


@router.post("/reset-password", response_model=ResetPasswordResponse, summary="Reset a user's password")
async def reset_password(
    request: ResetPasswordRequest,
    identity_for: IdentityLookup = Depends(get_identity_lookup),
):
    """Set a new password for the account with the given email."""
    service = AccountService(identity_for(request.account))
    user = await service.reset_password(request.email, request.new_password, context=RunContext.new())
    return ResetPasswordResponse(message=f"Password updated for {request.email}", user=user)


@router.post("/update-role", response_model=UpdateRoleResponse, summary="Change a user's role")
async def update_role(
    request: UpdateRoleRequest,
    identity_for: IdentityLookup = Depends(get_identity_lookup),
):
    """Store a new role in the user's metadata."""
    service = AccountService(identity_for(request.account))
    user = await service.update_role(request.user_id, request.role, context=RunContext.new())
    return UpdateRoleResponse(user=user)
