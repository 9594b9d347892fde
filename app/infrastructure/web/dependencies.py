"""
Shared router dependencies.
Repository and service providers plus conversion of use case results to HTTP responses.
"""

from typing import Annotated, Any, AsyncGenerator

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.application.use_cases.base_use_case import UseCaseResult
from app.domain.events.base import EventOutbox
from app.domain.models.base import BusinessRuleViolation
from app.infrastructure.db.database import SessionLocal, get_db
from app.infrastructure.repositories import (
    SQLAlchemyProfileRepository,
    SQLAlchemyQuestionRepository,
    SQLAlchemyApplicationRepository,
    SQLAlchemyPostRepository,
    SQLAlchemyReviewRepository,
    SQLAlchemyConversationRepository
)
from app.infrastructure.storage.storage_service import StorageService, get_storage_service
from app.infrastructure.web.middleware.error_handler import ERROR_STATUS_CODES


def get_session_factory():
    """Dependency to get the session factory, for work outside the request session (WebSockets)."""
    return SessionLocal


def get_profile_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyProfileRepository:
    """Dependency to get profile repository."""
    return SQLAlchemyProfileRepository(session)


def get_question_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyQuestionRepository:
    """Dependency to get questionnaire repository."""
    return SQLAlchemyQuestionRepository(session)


def get_application_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyApplicationRepository:
    """Dependency to get freelancer application repository."""
    return SQLAlchemyApplicationRepository(session)


def get_post_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyPostRepository:
    """Dependency to get post repository."""
    return SQLAlchemyPostRepository(session)


def get_review_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyReviewRepository:
    """Dependency to get review repository."""
    return SQLAlchemyReviewRepository(session)


def get_conversation_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyConversationRepository:
    """Dependency to get conversation repository."""
    return SQLAlchemyConversationRepository(session)


async def get_event_outbox(session: Annotated[Session, Depends(get_db)]) -> AsyncGenerator[EventOutbox, None]:
    """
    Dependency to get the request's event outbox.
    Held events are published after the request session commits and dropped when the request fails.
    """
    outbox = EventOutbox()
    try:
        yield outbox
    except Exception:
        outbox.discard()
        raise
    if outbox.pending:
        session.commit()
        await outbox.flush()


def get_storage() -> StorageService:
    """Dependency to get the storage service; 503 when Supabase is not configured."""
    try:
        return get_storage_service()
    except BusinessRuleViolation as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)


ProfileRepo = Annotated[SQLAlchemyProfileRepository, Depends(get_profile_repository)]
QuestionRepo = Annotated[SQLAlchemyQuestionRepository, Depends(get_question_repository)]
ApplicationRepo = Annotated[SQLAlchemyApplicationRepository, Depends(get_application_repository)]
PostRepo = Annotated[SQLAlchemyPostRepository, Depends(get_post_repository)]
ReviewRepo = Annotated[SQLAlchemyReviewRepository, Depends(get_review_repository)]
ConversationRepo = Annotated[SQLAlchemyConversationRepository, Depends(get_conversation_repository)]
Storage = Annotated[StorageService, Depends(get_storage)]
Outbox = Annotated[EventOutbox, Depends(get_event_outbox)]


def unwrap_result(result: UseCaseResult) -> Any:
    """
    Return the data of a successful use case result.
    Failed results become an HTTPException with the status of their error code.
    """
    if result.success:
        return result.data

    status_code = ERROR_STATUS_CODES.get(result.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        # internal details stay in the logs
        raise HTTPException(status_code=status_code, detail="An unexpected error occurred")
    raise HTTPException(status_code=status_code, detail=result.error)
