"""
Admin router.
User management, the freelancer application queue, questionnaire editing and database checks.
All endpoints require an admin.
"""

from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.infrastructure.auth import (
    AuthenticatedUser, SupabaseAuthService, get_auth_service, require_admin
)
from app.infrastructure.db.database import get_db
from app.infrastructure.web.dependencies import ApplicationRepo, QuestionRepo, ProfileRepo, Outbox, unwrap_result
from app.application.use_cases.admin_use_cases import (
    ListUsersUseCase,
    SetAccountStatusUseCase,
    CheckDatabaseUseCase
)
from app.application.use_cases.application_use_cases import (
    ListQuestionsUseCase,
    CreateQuestionUseCase,
    UpdateQuestionUseCase,
    DeleteQuestionUseCase,
    ReviewApplicationUseCase,
    ListApplicationsUseCase
)
from app.application.dto.base_dto import StatusResponseDTO
from app.application.dto.admin_dto import (
    ListUsersRequestDTO,
    SetAccountStatusRequestDTO,
    AdminUserResponseDTO,
    DatabaseCheckResponseDTO
)
from app.application.dto.application_dto import (
    CreateQuestionRequestDTO,
    UpdateQuestionRequestDTO,
    ReviewApplicationRequestDTO,
    ListApplicationsRequestDTO,
    QuestionResponseDTO,
    ApplicationResponseDTO
)


router = APIRouter()

Admin = Annotated[AuthenticatedUser, Depends(require_admin)]


# Users
@router.get("/users", response_model=List[AdminUserResponseDTO])
async def list_users(
    admin: Admin,
    profiles: ProfileRepo,
    auth_service: Annotated[SupabaseAuthService, Depends(get_auth_service)],
    role: Optional[str] = Query(None, pattern="^(admin|buyer|freelancer)$", description="Filter by role")
):
    """
    List user profiles, with auth emails when the service role key is configured.

    - **role**: Optional admin, buyer or freelancer filter
    """
    use_case = ListUsersUseCase(profiles, auth_service).set_current_user(admin.user_id, admin.roles)
    return unwrap_result(await use_case.execute(ListUsersRequestDTO(role=role)))


@router.put("/users/{user_id}/status", response_model=AdminUserResponseDTO)
async def set_account_status(
    user_id: str,
    request: SetAccountStatusRequestDTO,
    admin: Admin,
    outbox: Outbox,
    profiles: ProfileRepo
):
    """
    Suspend or reactivate an account.

    - **status**: active or suspended

    Admin accounts and your own account cannot be changed.
    """
    request.user_id = user_id
    use_case = SetAccountStatusUseCase(profiles).set_current_user(admin.user_id, admin.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(request))


# Applications
@router.get("/applications", response_model=List[ApplicationResponseDTO])
async def list_applications(
    admin: Admin,
    applications: ApplicationRepo,
    questions: QuestionRepo,
    profiles: ProfileRepo,
    status: Optional[str] = Query(None, pattern="^(pending|approved|rejected)$", description="Filter by status")
):
    """
    List freelancer applications with applicant and answers, newest submissions first.

    - **status**: Optional pending, approved or rejected filter
    """
    use_case = ListApplicationsUseCase(applications, questions, profiles).set_current_user(admin.user_id, admin.roles)
    return unwrap_result(await use_case.execute(ListApplicationsRequestDTO(status=status)))


@router.post("/applications/{application_id}/review", response_model=ApplicationResponseDTO)
async def review_application(
    application_id: str,
    request: ReviewApplicationRequestDTO,
    admin: Admin,
    outbox: Outbox,
    applications: ApplicationRepo,
    questions: QuestionRepo,
    profiles: ProfileRepo
):
    """
    Approve or reject a pending application.

    - **decision**: approved or rejected

    Approval makes the applicant an active freelancer. The applicant is notified by email.
    """
    request.application_id = application_id
    use_case = ReviewApplicationUseCase(applications, questions, profiles).set_current_user(admin.user_id, admin.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(request))


# Questionnaire
@router.get("/questions", response_model=List[QuestionResponseDTO])
async def list_questions(admin: Admin, questions: QuestionRepo):
    """
    List the questionnaire in display order.
    """
    return unwrap_result(await ListQuestionsUseCase(questions).execute(None))


@router.post("/questions", status_code=status.HTTP_201_CREATED, response_model=QuestionResponseDTO)
async def create_question(
    request: CreateQuestionRequestDTO,
    admin: Admin,
    outbox: Outbox,
    questions: QuestionRepo
):
    """
    Add a question after the last one.

    - **question**: Question text
    - **required**: Whether an answer is mandatory
    - **type**: text or textarea
    """
    use_case = CreateQuestionUseCase(questions).set_current_user(admin.user_id, admin.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(request))


@router.patch("/questions/{question_id}", response_model=QuestionResponseDTO)
async def update_question(
    question_id: str,
    request: UpdateQuestionRequestDTO,
    admin: Admin,
    outbox: Outbox,
    questions: QuestionRepo
):
    """
    Edit a question. Omitted fields stay unchanged.
    """
    request.question_id = question_id
    use_case = UpdateQuestionUseCase(questions).set_current_user(admin.user_id, admin.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(request))


@router.delete("/questions/{question_id}", response_model=StatusResponseDTO)
async def delete_question(
    question_id: str,
    admin: Admin,
    outbox: Outbox,
    questions: QuestionRepo
):
    """
    Delete a question and the answers given to it.
    """
    use_case = DeleteQuestionUseCase(questions).set_current_user(admin.user_id, admin.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(question_id))


# Diagnostics
@router.get("/database", response_model=DatabaseCheckResponseDTO)
async def check_database(
    admin: Admin,
    session: Annotated[Session, Depends(get_db)]
):
    """
    Check the database connection and that every marketplace table exists.
    """
    use_case = CheckDatabaseUseCase(session.get_bind()).set_current_user(admin.user_id, admin.roles)
    return unwrap_result(await use_case.execute(None))
