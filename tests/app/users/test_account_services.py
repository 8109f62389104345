"""
Unit tests for bulk user import and single-account administration.
"""

import pytest

from app.users.services.accounts import AccountService
from app.users.services.bulk_import import BulkImportService, ImportRow
from lmsadmin_core.domain.exceptions import UserNotFound, ValidationError
from lmsadmin_core.runtime import BackendError
from tests.app.users.fakes import FakeIdentityAdmin


class TestImportRow:
    """Tests for row normalization."""

    def test_trims_and_defaults_role(self):
        row = ImportRow.from_raw({"email": " a@x.io ", "password": " pw ", "role": "Teacher"})

        assert row.email == "a@x.io"
        assert row.password == "pw"
        assert row.role == "user"

    def test_keeps_admin_role(self):
        assert ImportRow.from_raw({"role": " ADMIN "}).role == "admin"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ({"display_name": "Ada", "name": "ignored"}, "Ada"),
            ({"employee name": "Grace"}, "Grace"),
            ({"employee_name": "Linus"}, "Linus"),
            ({"name": "Ken"}, "Ken"),
            ({}, ""),
        ],
    )
    def test_display_name_sources(self, raw, expected):
        assert ImportRow.from_raw(raw).display_name == expected


class TestBulkImportService:
    """Tests for BulkImportService.import_rows."""

    @pytest.mark.asyncio
    async def test_creates_confirmed_users_with_metadata(self):
        identity = FakeIdentityAdmin()

        results = await BulkImportService(identity).import_rows(
            [{"email": "a@x.io", "password": "pw", "employee name": "Ada", "role": "admin"}]
        )

        assert results[0]["success"] is True
        assert identity.users[0]["email_confirmed"] is True
        assert identity.users[0]["user_metadata"] == {"display_name": "Ada", "role": "admin"}

    @pytest.mark.asyncio
    async def test_row_failures_do_not_cancel_others(self):
        identity = FakeIdentityAdmin(reject={"dup@x.io"})
        rows = [
            {"email": "a@x.io", "password": "pw"},
            {"email": "dup@x.io", "password": "pw"},
            {"email": "", "password": "pw"},
            {"email": "b@x.io", "password": "pw"},
        ]

        results = await BulkImportService(identity).import_rows(rows)

        assert [r["success"] for r in results] == [True, False, False, True]
        assert "already been registered" in results[1]["error"]
        assert results[2]["error"] == "email or password missing"
        assert [r["row"] for r in results] == rows

    @pytest.mark.asyncio
    async def test_invalid_rows_make_no_backend_call(self):
        identity = FakeIdentityAdmin()

        await BulkImportService(identity).import_rows([{"email": "a@x.io"}, {"password": "pw"}])

        assert identity.created == []

    @pytest.mark.asyncio
    async def test_rows_run_concurrently(self):
        identity = FakeIdentityAdmin()
        rows = [{"email": f"u{i}@x.io", "password": "pw"} for i in range(5)]

        await BulkImportService(identity).import_rows(rows)

        assert identity.max_in_flight == 5

    @pytest.mark.asyncio
    async def test_empty_rows(self):
        assert await BulkImportService(FakeIdentityAdmin()).import_rows([]) == []


@pytest.fixture
def identity():
    users = [
        {"id": f"user-{i}", "email": f"u{i}@x.io", "user_metadata": {"role": "user"}}
        for i in range(5)
    ]
    return FakeIdentityAdmin(users)


class TestAccountService:
    """Tests for AccountService."""

    @pytest.mark.asyncio
    async def test_reset_password_pages_until_found(self, identity):
        service = AccountService(identity, per_page=2)

        await service.reset_password("U4@x.io", "n3w")

        assert identity.list_pages == [1, 2, 3]
        assert identity.updates == [("user-4", {"password": "n3w", "email_confirm": True})]

    @pytest.mark.asyncio
    async def test_reset_password_unknown_email(self, identity):
        with pytest.raises(UserNotFound):
            await AccountService(identity, per_page=2).reset_password("nobody@x.io", "pw")

        assert identity.updates == []

    @pytest.mark.asyncio
    async def test_reset_password_requires_fields(self, identity):
        with pytest.raises(ValidationError):
            await AccountService(identity).reset_password("u1@x.io", "")

        assert identity.list_pages == []

    @pytest.mark.asyncio
    async def test_update_role(self, identity):
        user = await AccountService(identity).update_role("user-2", "admin")

        assert user["user_metadata"]["role"] == "admin"

    @pytest.mark.asyncio
    async def test_update_role_backend_error_propagates(self, identity):
        with pytest.raises(BackendError):
            await AccountService(identity).update_role("missing", "admin")

    @pytest.mark.asyncio
    async def test_update_role_requires_fields(self, identity):
        with pytest.raises(ValidationError):
            await AccountService(identity).update_role(None, "admin")
