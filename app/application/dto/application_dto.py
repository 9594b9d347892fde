"""
Freelancer application DTOs for the application layer.
"""

from typing import Optional, List, Dict
from datetime import datetime
from pydantic import Field, validator

from .base_dto import BaseDTO, RequestDTO, ResponseDTO, CreateRequestDTO, UpdateRequestDTO
from .profile_dto import ProfileSummaryResponseDTO
from app.domain.models.application import (
    ApplicationQuestion, FreelancerApplication, QuestionType
)
from app.infrastructure.validation.validators import SecurityValidator


# Request DTOs
class CreateQuestionRequestDTO(CreateRequestDTO):
    """DTO for adding a questionnaire question."""
    
    question: str = Field(min_length=1, max_length=500, description="Question text")
    required: bool = Field(default=True, description="Whether an answer is mandatory")
    type: QuestionType = Field(default=QuestionType.TEXTAREA, description="text or textarea")
    
    @validator('question')
    def validate_question(cls, v):
        return SecurityValidator.sanitize_html(v.strip())


class UpdateQuestionRequestDTO(UpdateRequestDTO):
    """DTO for editing a questionnaire question."""
    
    question_id: Optional[str] = Field(default=None, description="Set from the URL path")
    question: Optional[str] = Field(default=None, min_length=1, max_length=500, description="Question text")
    required: Optional[bool] = Field(default=None, description="Whether an answer is mandatory")
    type: Optional[QuestionType] = Field(default=None, description="text or textarea")
    order_position: Optional[int] = Field(default=None, ge=0, description="Position in the questionnaire")
    
    @validator('question')
    def validate_question(cls, v):
        if v is not None:
            return SecurityValidator.sanitize_html(v.strip())
        return v


class SubmitApplicationRequestDTO(RequestDTO):
    """DTO for submitting the questionnaire."""
    
    answers: Dict[str, str] = Field(description="Answer text by question ID")
    
    @validator('answers')
    def validate_answers(cls, v):
        return {
            question_id: SecurityValidator.sanitize_html(text or "")
            for question_id, text in v.items()
        }


class ReviewApplicationRequestDTO(RequestDTO):
    """DTO for an admin decision on an application."""
    
    application_id: Optional[str] = Field(default=None, description="Set from the URL path")
    decision: str = Field(pattern="^(approved|rejected)$", description="approved or rejected")
    
    @property
    def approved(self) -> bool:
        return self.decision == "approved"


class ListApplicationsRequestDTO(RequestDTO):
    """DTO for the admin application list."""
    
    status: Optional[str] = Field(default=None, pattern="^(pending|approved|rejected)$", description="Status filter")


# Response DTOs
class QuestionResponseDTO(ResponseDTO):
    """DTO for a questionnaire question."""
    
    question: str = Field(description="Question text")
    order_position: int = Field(description="Position in the questionnaire")
    required: bool = Field(description="Whether an answer is mandatory")
    type: str = Field(description="text or textarea")
    
    @classmethod
    def from_domain(cls, question: ApplicationQuestion) -> "QuestionResponseDTO":
        return cls(
            id=question.id,
            question=question.question,
            order_position=question.order_position,
            required=question.required,
            type=question.type.value,
            created_at=question.created_at,
            updated_at=question.updated_at
        )


class AnswerResponseDTO(BaseDTO):
    """DTO for one answer, with the question text when known."""
    
    question_id: str = Field(description="Question ID")
    question: Optional[str] = Field(default=None, description="Question text")
    answer: str = Field(description="Answer text")


class ApplicationResponseDTO(ResponseDTO):
    """DTO for a freelancer application."""
    
    user_id: str = Field(description="Applicant ID")
    status: str = Field(description="pending, approved or rejected")
    submitted_at: Optional[datetime] = Field(default=None, description="Last submission time")
    reviewed_at: Optional[datetime] = Field(default=None, description="Review time")
    reviewed_by: Optional[str] = Field(default=None, description="Reviewing admin")
    answers: List[AnswerResponseDTO] = Field(default_factory=list, description="Answers in questionnaire order")
    applicant: Optional[ProfileSummaryResponseDTO] = Field(default=None, description="Applicant card (admin views)")
    
    @classmethod
    def from_domain(
        cls,
        application: FreelancerApplication,
        questions: Optional[List[ApplicationQuestion]] = None,
        applicant: Optional[ProfileSummaryResponseDTO] = None
    ) -> "ApplicationResponseDTO":
        questions = questions or []
        position = {question.id: index for index, question in enumerate(questions)}
        text = {question.id: question.question for question in questions}
        answers = sorted(application.answers, key=lambda answer: position.get(answer.question_id, len(position)))
        return cls(
            id=application.id,
            user_id=application.user_id,
            status=application.status.value,
            submitted_at=application.submitted_at,
            reviewed_at=application.reviewed_at,
            reviewed_by=application.reviewed_by,
            answers=[
                AnswerResponseDTO(
                    question_id=answer.question_id,
                    question=text.get(answer.question_id),
                    answer=answer.answer
                )
                for answer in answers
            ],
            applicant=applicant,
            created_at=application.created_at,
            updated_at=application.updated_at
        )
