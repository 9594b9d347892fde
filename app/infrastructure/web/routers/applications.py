"""
Freelancer application router.
Handles the questionnaire and the caller's own application.
"""

from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, status

from app.infrastructure.auth import AuthenticatedUser, get_current_user
from app.infrastructure.web.dependencies import ApplicationRepo, QuestionRepo, ProfileRepo, Outbox, unwrap_result
from app.application.use_cases.application_use_cases import (
    ListQuestionsUseCase,
    GetMyApplicationUseCase,
    SubmitApplicationUseCase,
    DeleteMyApplicationUseCase
)
from app.application.dto.base_dto import StatusResponseDTO
from app.application.dto.application_dto import (
    SubmitApplicationRequestDTO,
    QuestionResponseDTO,
    ApplicationResponseDTO
)


router = APIRouter()


@router.get("/questions", response_model=List[QuestionResponseDTO])
async def list_questions(questions: QuestionRepo):
    """
    List the questionnaire in display order.

    Public, so applicants can read it before signing up.
    """
    return unwrap_result(await ListQuestionsUseCase(questions).execute(None))


@router.get("/me", response_model=Optional[ApplicationResponseDTO])
async def get_my_application(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    applications: ApplicationRepo,
    questions: QuestionRepo
):
    """
    Get the caller's application with its answers.

    Returns null when the caller never applied.
    """
    use_case = GetMyApplicationUseCase(applications, questions).set_current_user(user.user_id, user.roles)
    return unwrap_result(await use_case.execute(None))


@router.post("/me", status_code=status.HTTP_201_CREATED, response_model=ApplicationResponseDTO)
async def submit_application(
    request: SubmitApplicationRequestDTO,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    applications: ApplicationRepo,
    questions: QuestionRepo,
    profiles: ProfileRepo
):
    """
    Submit or resubmit the questionnaire.

    - **answers**: Answer text by question ID; every required question needs a non-blank answer

    A pending application cannot be edited and an approved one cannot be resubmitted.
    """
    use_case = SubmitApplicationUseCase(applications, questions, profiles).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(request))


@router.delete("/me", response_model=StatusResponseDTO)
async def delete_my_application(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    applications: ApplicationRepo,
    profiles: ProfileRepo
):
    """
    Withdraw the caller's application.

    Approved applications cannot be withdrawn.
    """
    use_case = DeleteMyApplicationUseCase(applications, profiles).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(None))
