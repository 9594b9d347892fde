"""
Unit tests for admin use cases.
"""

import pytest
from sqlalchemy import create_engine

from app.application.dto.admin_dto import ListUsersRequestDTO, SetAccountStatusRequestDTO
from app.application.use_cases.admin_use_cases import (
    ListUsersUseCase,
    SetAccountStatusUseCase,
    CheckDatabaseUseCase
)
from app.config import settings
from app.domain.models.profile import AccountStatus, UserRole


ADMIN = ("admin-1", ["admin"])


class TestListUsersUseCase:
    """Test cases for the admin user list."""

    @pytest.fixture(autouse=True)
    def service_role(self, monkeypatch):
        monkeypatch.setattr(settings, "supabase_url", "https://project.supabase.co")
        monkeypatch.setattr(settings, "supabase_service_key", "service-key")

    @pytest.mark.asyncio
    async def test_lists_profiles_with_emails(self, repos, seed, auth_service):
        """Test emails are merged from Supabase Auth."""
        seed.profile("buyer-1")
        seed.profile("seller-1", UserRole.FREELANCER)
        auth_service.list_user_emails.return_value = {"buyer-1": "bob@example.com"}

        result = await ListUsersUseCase(repos.profiles, auth_service).set_current_user(*ADMIN).execute(
            ListUsersRequestDTO()
        )

        emails = {user.user_id: user.email for user in result.data}
        assert emails == {"buyer-1": "bob@example.com", "seller-1": None}

    @pytest.mark.asyncio
    async def test_role_filter(self, repos, seed, auth_service):
        """Test the list can be restricted to a role."""
        seed.profile("buyer-1")
        seed.profile("seller-1", UserRole.FREELANCER)

        result = await ListUsersUseCase(repos.profiles, auth_service).set_current_user(*ADMIN).execute(
            ListUsersRequestDTO(role="freelancer")
        )

        assert [user.user_id for user in result.data] == ["seller-1"]

    @pytest.mark.asyncio
    async def test_email_lookup_failure_is_tolerated(self, repos, seed, auth_service):
        """Test the list survives an Auth outage."""
        seed.profile("buyer-1")
        auth_service.list_user_emails.side_effect = RuntimeError("auth down")

        result = await ListUsersUseCase(repos.profiles, auth_service).set_current_user(*ADMIN).execute(
            ListUsersRequestDTO()
        )

        assert result.success is True
        assert result.data[0].email is None

    @pytest.mark.asyncio
    async def test_requires_admin(self, repos, auth_service):
        """Test non-admins are denied."""
        result = await ListUsersUseCase(repos.profiles, auth_service).set_current_user(
            "buyer-1", ["buyer"]
        ).execute(ListUsersRequestDTO())

        assert result.error_code == "PERMISSION_DENIED"


class TestSetAccountStatusUseCase:
    """Test cases for suspending and reactivating accounts."""

    async def _set(self, repos, user_id, status, caller=ADMIN):
        return await SetAccountStatusUseCase(repos.profiles).set_current_user(*caller).execute(
            SetAccountStatusRequestDTO(user_id=user_id, status=status)
        )

    @pytest.mark.asyncio
    async def test_suspend_and_reactivate(self, repos, seed, event_dispatcher):
        """Test status changes are stored and announced."""
        seed.profile("seller-1", UserRole.FREELANCER)

        suspended = await self._set(repos, "seller-1", "suspended")
        entry = event_dispatcher.get_event_log(limit=1)[0]
        reactivated = await self._set(repos, "seller-1", "active")

        assert suspended.data.account_status == "suspended"
        assert entry["event_type"] == "AccountStatusChanged"
        assert entry["data"]["changed_by"] == "admin-1"
        assert reactivated.data.account_status == "active"
        assert repos.profiles.find_by_user_id("seller-1").account_status == AccountStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_admins_are_protected(self, repos, seed):
        """Test admins cannot be suspended, not even by themselves."""
        seed.profile("admin-1", UserRole.ADMIN)
        seed.profile("admin-2", UserRole.ADMIN)

        other = await self._set(repos, "admin-2", "suspended")
        own = await self._set(repos, "admin-1", "suspended")

        assert other.error_code == "BUSINESS_RULE_VIOLATION"
        assert own.error_code == "BUSINESS_RULE_VIOLATION"

    @pytest.mark.asyncio
    async def test_unknown_user(self, repos):
        """Test missing profiles are not found."""
        result = await self._set(repos, "ghost", "suspended")

        assert result.error_code == "ENTITY_NOT_FOUND"


class TestCheckDatabaseUseCase:
    """Test cases for the database diagnostics."""

    @pytest.mark.asyncio
    async def test_all_tables_present(self, engine):
        """Test a migrated database is healthy."""
        result = await CheckDatabaseUseCase(engine).set_current_user(*ADMIN).execute(None)

        assert result.data.connected is True
        assert result.data.healthy is True
        assert result.data.missing == []

    @pytest.mark.asyncio
    async def test_missing_tables_are_reported(self):
        """Test an empty database lists every table as missing."""
        empty = create_engine("sqlite://")

        result = await CheckDatabaseUseCase(empty).set_current_user(*ADMIN).execute(None)

        assert result.data.connected is True
        assert result.data.healthy is False
        assert "profiles" in result.data.missing
        assert result.data.present == []
