"""
Admin use cases for the application layer.
User management and database diagnostics.
"""

import logging
from typing import Dict, List

from sqlalchemy.engine import Engine

from app.config import settings
from app.application.use_cases.base_use_case import (
    UpdateUseCase, QueryUseCase, AuthorizedUseCase
)
from app.application.use_cases.profile_use_cases import load_profile
from app.application.dto.admin_dto import (
    ListUsersRequestDTO, SetAccountStatusRequestDTO, AdminUserResponseDTO, DatabaseCheckResponseDTO
)
from app.domain.models.base import BusinessRuleViolation
from app.domain.models.profile import AccountStatus, UserRole
from app.domain.repositories.profile_repository import ProfileRepository
from app.infrastructure.db.health import check_required_tables


logger = logging.getLogger(__name__)


class ListUsersUseCase(AuthorizedUseCase, QueryUseCase[ListUsersRequestDTO, List[AdminUserResponseDTO]]):
    """
    Use case for the admin user list.
    Emails come from Supabase Auth and are only available with the service role key.
    """

    def __init__(self, profile_repository: ProfileRepository, auth_service):
        super().__init__()
        self.profile_repository = profile_repository
        self.auth_service = auth_service

    async def _check_authorization(self, request: ListUsersRequestDTO) -> None:
        self._require_role("admin")

    async def _execute_business_logic(self, request: ListUsersRequestDTO) -> List[AdminUserResponseDTO]:
        role = UserRole(request.role) if request.role else None
        profiles = self.profile_repository.list_profiles(role)
        emails = self._load_emails()
        return [
            AdminUserResponseDTO.from_profile(profile, emails.get(profile.user_id))
            for profile in profiles
        ]

    def _load_emails(self) -> Dict[str, str]:
        if not settings.has_service_role:
            return {}
        try:
            return self.auth_service.list_user_emails()
        except Exception as e:
            # the list is still useful without emails
            logger.warning(f"Could not load auth emails: {str(e)}")
            return {}


class SetAccountStatusUseCase(AuthorizedUseCase, UpdateUseCase[SetAccountStatusRequestDTO, AdminUserResponseDTO]):
    """Use case for suspending or reactivating an account."""

    def __init__(self, profile_repository: ProfileRepository):
        super().__init__()
        self.profile_repository = profile_repository

    async def _check_authorization(self, request: SetAccountStatusRequestDTO) -> None:
        self._require_role("admin")

    async def _execute_command_logic(self, request: SetAccountStatusRequestDTO) -> AdminUserResponseDTO:
        if request.user_id == self.current_user_id:
            raise BusinessRuleViolation("You cannot change your own account status")

        profile = load_profile(self.profile_repository, request.user_id)
        if profile.is_admin:
            raise BusinessRuleViolation("Admin accounts cannot be suspended")

        previous = profile.change_status(AccountStatus(request.status), changed_by=self.current_user_id)
        self.profile_repository.save(profile)
        self._collect_events(profile)
        logger.info(
            f"Account {profile.user_id} status {previous.value} -> {profile.account_status.value} "
            f"by {self.current_user_id}"
        )
        return AdminUserResponseDTO.from_profile(profile)


class CheckDatabaseUseCase(AuthorizedUseCase, QueryUseCase[None, DatabaseCheckResponseDTO]):
    """Use case for checking that every marketplace table exists."""

    def __init__(self, engine: Engine):
        super().__init__()
        self.engine = engine

    async def _check_authorization(self, request: None) -> None:
        self._require_role("admin")

    async def _execute_business_logic(self, request: None) -> DatabaseCheckResponseDTO:
        result = check_required_tables(self.engine)
        return DatabaseCheckResponseDTO(
            connected=result.connected,
            healthy=result.healthy,
            present=result.present,
            missing=result.missing,
            error=result.error or None
        )
