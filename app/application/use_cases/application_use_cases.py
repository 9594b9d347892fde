"""
Freelancer application use cases for the application layer.
Questionnaire management, submissions and admin review.
"""

import logging
from typing import List, Optional

from app.application.use_cases.base_use_case import (
    CreateUseCase, UpdateUseCase, DeleteUseCase, QueryUseCase, AuthorizedUseCase
)
from app.application.use_cases.profile_use_cases import load_profile, profile_cards
from app.application.dto.base_dto import StatusResponseDTO
from app.application.dto.application_dto import (
    CreateQuestionRequestDTO, UpdateQuestionRequestDTO, SubmitApplicationRequestDTO,
    ReviewApplicationRequestDTO, ListApplicationsRequestDTO,
    QuestionResponseDTO, ApplicationResponseDTO
)
from app.domain.models.application import (
    ApplicationQuestion, ApplicationStatus, FreelancerApplication
)
from app.domain.models.base import EntityNotFoundError, BusinessRuleViolation
from app.domain.models.profile import AccountStatus, UserRole
from app.domain.repositories.application_repository import ApplicationRepository, QuestionRepository
from app.domain.repositories.profile_repository import ProfileRepository


logger = logging.getLogger(__name__)


class ListQuestionsUseCase(QueryUseCase[None, List[QuestionResponseDTO]]):
    """Use case for reading the questionnaire in order."""
    
    def __init__(self, question_repository: QuestionRepository):
        super().__init__()
        self.question_repository = question_repository
    
    async def _execute_business_logic(self, request: None) -> List[QuestionResponseDTO]:
        return [QuestionResponseDTO.from_domain(q) for q in self.question_repository.list_ordered()]


class CreateQuestionUseCase(AuthorizedUseCase, CreateUseCase[CreateQuestionRequestDTO, QuestionResponseDTO]):
    """Use case for adding a question after the current last one."""
    
    def __init__(self, question_repository: QuestionRepository):
        super().__init__()
        self.question_repository = question_repository
    
    async def _check_authorization(self, request: CreateQuestionRequestDTO) -> None:
        self._require_role("admin")
    
    async def _execute_command_logic(self, request: CreateQuestionRequestDTO) -> QuestionResponseDTO:
        question = ApplicationQuestion.create(
            question=request.question,
            order_position=self.question_repository.max_position() + 1,
            required=request.required,
            type=request.type
        )
        self.question_repository.save(question)
        return QuestionResponseDTO.from_domain(question)


class UpdateQuestionUseCase(AuthorizedUseCase, UpdateUseCase[UpdateQuestionRequestDTO, QuestionResponseDTO]):
    """Use case for editing a question."""
    
    def __init__(self, question_repository: QuestionRepository):
        super().__init__()
        self.question_repository = question_repository
    
    async def _check_authorization(self, request: UpdateQuestionRequestDTO) -> None:
        self._require_role("admin")
    
    async def _execute_command_logic(self, request: UpdateQuestionRequestDTO) -> QuestionResponseDTO:
        question = self.question_repository.find_by_id(request.question_id)
        if not question:
            raise EntityNotFoundError("Question", request.question_id)
        
        question.update(
            question=request.question,
            required=request.required,
            type=request.type,
            order_position=request.order_position
        )
        self.question_repository.save(question)
        return QuestionResponseDTO.from_domain(question)


class DeleteQuestionUseCase(AuthorizedUseCase, DeleteUseCase[str, StatusResponseDTO]):
    """Use case for removing a question together with its answers."""
    
    def __init__(self, question_repository: QuestionRepository):
        super().__init__()
        self.question_repository = question_repository
    
    async def _check_authorization(self, request: str) -> None:
        self._require_role("admin")
    
    async def _execute_command_logic(self, question_id: str) -> StatusResponseDTO:
        if not self.question_repository.delete(question_id):
            raise EntityNotFoundError("Question", question_id)
        return StatusResponseDTO(message="Question deleted")


class GetMyApplicationUseCase(AuthorizedUseCase, QueryUseCase[None, Optional[ApplicationResponseDTO]]):
    """Use case for reading the caller's application, None when never submitted."""
    
    def __init__(self, application_repository: ApplicationRepository, question_repository: QuestionRepository):
        super().__init__()
        self.application_repository = application_repository
        self.question_repository = question_repository
    
    async def _execute_business_logic(self, request: None) -> Optional[ApplicationResponseDTO]:
        application = self.application_repository.find_by_user(self.current_user_id)
        if application is None:
            return None
        return ApplicationResponseDTO.from_domain(application, self.question_repository.list_ordered())


class SubmitApplicationUseCase(AuthorizedUseCase, CreateUseCase[SubmitApplicationRequestDTO, ApplicationResponseDTO]):
    """
    Use case for submitting the questionnaire.
    A first submission creates the application; a rejected one may be resubmitted.
    Either way the account waits for approval.
    """
    
    def __init__(
        self,
        application_repository: ApplicationRepository,
        question_repository: QuestionRepository,
        profile_repository: ProfileRepository
    ):
        super().__init__()
        self.application_repository = application_repository
        self.question_repository = question_repository
        self.profile_repository = profile_repository
    
    async def _execute_command_logic(self, request: SubmitApplicationRequestDTO) -> ApplicationResponseDTO:
        profile = load_profile(self.profile_repository, self.current_user_id)
        profile.ensure_can_act()
        if profile.is_admin:
            raise BusinessRuleViolation("Admins do not need to apply")
        
        questions = self.question_repository.list_ordered()
        application = self.application_repository.find_by_user(self.current_user_id)
        if application is None:
            application = FreelancerApplication.submit_new(self.current_user_id, questions, request.answers)
        else:
            application.resubmit(questions, request.answers)
        self.application_repository.save(application)
        
        profile.change_status(AccountStatus.PENDING_APPROVAL, changed_by=self.current_user_id)
        self.profile_repository.save(profile)
        
        self._collect_events(application, profile)
        logger.info(f"Application {application.id} submitted by {self.current_user_id}")
        return ApplicationResponseDTO.from_domain(application, questions)


class DeleteMyApplicationUseCase(AuthorizedUseCase, DeleteUseCase[None, StatusResponseDTO]):
    """Use case for withdrawing a pending or rejected application."""
    
    def __init__(self, application_repository: ApplicationRepository, profile_repository: ProfileRepository):
        super().__init__()
        self.application_repository = application_repository
        self.profile_repository = profile_repository
    
    async def _execute_command_logic(self, request: None) -> StatusResponseDTO:
        application = self.application_repository.find_by_user(self.current_user_id)
        if application is None:
            raise EntityNotFoundError("Application", self.current_user_id)
        application.ensure_can_withdraw()
        self.application_repository.delete(application.id)
        
        profile = self.profile_repository.find_by_user_id(self.current_user_id)
        if profile and profile.account_status in (AccountStatus.PENDING_APPROVAL, AccountStatus.REJECTED):
            profile.change_status(AccountStatus.ACTIVE, changed_by=self.current_user_id)
            self.profile_repository.save(profile)
            self._collect_events(profile)
        
        return StatusResponseDTO(message="Application deleted")


class ReviewApplicationUseCase(AuthorizedUseCase, UpdateUseCase[ReviewApplicationRequestDTO, ApplicationResponseDTO]):
    """
    Use case for an admin decision on a pending application.
    Approval makes the applicant an active freelancer; rejection marks the account rejected.
    """
    
    def __init__(
        self,
        application_repository: ApplicationRepository,
        question_repository: QuestionRepository,
        profile_repository: ProfileRepository
    ):
        super().__init__()
        self.application_repository = application_repository
        self.question_repository = question_repository
        self.profile_repository = profile_repository
    
    async def _check_authorization(self, request: ReviewApplicationRequestDTO) -> None:
        self._require_role("admin")
    
    async def _execute_command_logic(self, request: ReviewApplicationRequestDTO) -> ApplicationResponseDTO:
        application = self.application_repository.find_by_id(request.application_id)
        if application is None:
            raise EntityNotFoundError("Application", request.application_id)
        
        application.review(request.approved, self.current_user_id)
        self.application_repository.save(application)
        
        profile = load_profile(self.profile_repository, application.user_id)
        if request.approved:
            if not profile.is_admin:
                profile.promote_to(UserRole.FREELANCER)
            profile.change_status(AccountStatus.ACTIVE, changed_by=self.current_user_id)
        else:
            profile.change_status(AccountStatus.REJECTED, changed_by=self.current_user_id)
        self.profile_repository.save(profile)
        
        self._collect_events(application, profile)
        logger.info(f"Application {application.id} {application.status.value} by {self.current_user_id}")
        
        cards = profile_cards(self.profile_repository, [application.user_id])
        return ApplicationResponseDTO.from_domain(
            application, self.question_repository.list_ordered(), cards[application.user_id]
        )


class ListApplicationsUseCase(AuthorizedUseCase, QueryUseCase[ListApplicationsRequestDTO, List[ApplicationResponseDTO]]):
    """Use case for the admin application queue, newest submissions first."""
    
    def __init__(
        self,
        application_repository: ApplicationRepository,
        question_repository: QuestionRepository,
        profile_repository: ProfileRepository
    ):
        super().__init__()
        self.application_repository = application_repository
        self.question_repository = question_repository
        self.profile_repository = profile_repository
    
    async def _check_authorization(self, request: ListApplicationsRequestDTO) -> None:
        self._require_role("admin")
    
    async def _execute_business_logic(self, request: ListApplicationsRequestDTO) -> List[ApplicationResponseDTO]:
        status = ApplicationStatus(request.status) if request.status else None
        applications = self.application_repository.list_applications(status)
        questions = self.question_repository.list_ordered()
        cards = profile_cards(self.profile_repository, [a.user_id for a in applications])
        return [
            ApplicationResponseDTO.from_domain(application, questions, cards[application.user_id])
            for application in applications
        ]
