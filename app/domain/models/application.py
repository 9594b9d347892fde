"""
Freelancer application domain models.
Users answer the admin-defined questionnaire to become approved freelancers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from app.domain.events.marketplace_events import ApplicationSubmitted, ApplicationReviewed
from .base import BaseEntity, AggregateRoot, ValidationError, BusinessRuleViolation, new_id


class ApplicationStatus(str, Enum):
    """Application review status."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class QuestionType(str, Enum):
    """Input type used to render a question."""
    TEXT = "text"
    TEXTAREA = "textarea"


MAX_ANSWER_LENGTH = 5000


@dataclass(kw_only=True, eq=False)
class ApplicationQuestion(BaseEntity):
    """A question of the freelancer questionnaire."""
    
    question: str
    order_position: int = 0
    required: bool = True
    type: QuestionType = QuestionType.TEXTAREA
    
    def __post_init__(self):
        super().__post_init__()
        if isinstance(self.type, str):
            self.type = QuestionType(self.type)
        self.validate()
    
    @classmethod
    def create(
        cls,
        question: str,
        order_position: int,
        required: bool = True,
        type: QuestionType = QuestionType.TEXTAREA
    ) -> "ApplicationQuestion":
        return cls(
            id=new_id(),
            question=question.strip(),
            order_position=order_position,
            required=required,
            type=type
        )
    
    def validate(self) -> None:
        if not self.question or not self.question.strip():
            raise ValidationError("Question text is required", "question")
        if len(self.question) > 500:
            raise ValidationError("Question too long (max 500 characters)", "question")
        if self.order_position < 0:
            raise ValidationError("Order position cannot be negative", "order_position")
    
    def update(
        self,
        question: Optional[str] = None,
        required: Optional[bool] = None,
        type: Optional[QuestionType] = None,
        order_position: Optional[int] = None
    ) -> None:
        if question is not None:
            self.question = question.strip()
        if required is not None:
            self.required = required
        if type is not None:
            self.type = QuestionType(type)
        if order_position is not None:
            self.order_position = order_position
        self.validate()
        self.mark_as_updated()


@dataclass(kw_only=True, eq=False)
class ApplicationAnswer(BaseEntity):
    """Answer to one question of an application."""
    
    question_id: str
    answer: str = ""
    application_id: Optional[str] = None


@dataclass(kw_only=True, eq=False)
class FreelancerApplication(AggregateRoot):
    """
    Freelancer application aggregate root.
    One application per user; rejected applications may be resubmitted.
    """
    
    user_id: str
    status: ApplicationStatus = ApplicationStatus.PENDING
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    answers: List[ApplicationAnswer] = field(default_factory=list)
    
    def __post_init__(self):
        super().__post_init__()
        if isinstance(self.status, str):
            self.status = ApplicationStatus(self.status)
        if not self.user_id:
            raise ValidationError("User ID is required", "user_id")
    
    @property
    def is_pending(self) -> bool:
        return self.status == ApplicationStatus.PENDING
    
    @property
    def is_approved(self) -> bool:
        return self.status == ApplicationStatus.APPROVED
    
    @property
    def is_rejected(self) -> bool:
        return self.status == ApplicationStatus.REJECTED
    
    @property
    def answers_by_question(self) -> Dict[str, str]:
        return {answer.question_id: answer.answer for answer in self.answers}
    
    @staticmethod
    def check_answers(questions: List[ApplicationQuestion], answers: Dict[str, str]) -> Dict[str, str]:
        """
        Validate answers against the questionnaire and return them stripped.
        Every required question needs a non-blank answer; unknown questions are rejected.
        """
        known = {q.id for q in questions}
        unknown = [qid for qid in answers if qid not in known]
        if unknown:
            raise ValidationError(f"Unknown question: {unknown[0]}", "answers")
        
        cleaned = {qid: (text or "").strip() for qid, text in answers.items()}
        for question in questions:
            if question.required and not cleaned.get(question.id):
                raise ValidationError(f"Please answer: {question.question}", question.id)
        for qid, text in cleaned.items():
            if len(text) > MAX_ANSWER_LENGTH:
                raise ValidationError(
                    f"Answer too long (max {MAX_ANSWER_LENGTH} characters)", qid
                )
        return cleaned
    
    @classmethod
    def submit_new(
        cls,
        user_id: str,
        questions: List[ApplicationQuestion],
        answers: Dict[str, str]
    ) -> "FreelancerApplication":
        """Create and submit a first application."""
        cleaned = cls.check_answers(questions, answers)
        application = cls(id=new_id(), user_id=user_id)
        application._apply_answers(cleaned)
        application.submitted_at = datetime.utcnow()
        application.add_event(ApplicationSubmitted(
            application_id=application.id,
            user_id=user_id
        ))
        return application
    
    def resubmit(self, questions: List[ApplicationQuestion], answers: Dict[str, str]) -> None:
        """Resubmit a rejected application with updated answers."""
        if self.is_pending:
            raise BusinessRuleViolation("Your application is already under review")
        if self.is_approved:
            raise BusinessRuleViolation("Your application has already been approved")
        
        cleaned = self.check_answers(questions, answers)
        self._apply_answers(cleaned)
        self.status = ApplicationStatus.PENDING
        self.submitted_at = datetime.utcnow()
        self.reviewed_at = None
        self.reviewed_by = None
        self.increment_version()
        self.add_event(ApplicationSubmitted(
            application_id=self.id,
            user_id=self.user_id,
            resubmission=True
        ))
    
    def _apply_answers(self, answers: Dict[str, str]) -> None:
        """Upsert answers keyed by question."""
        existing = {answer.question_id: answer for answer in self.answers}
        for question_id, text in answers.items():
            if question_id in existing:
                existing[question_id].answer = text
                existing[question_id].mark_as_updated()
            else:
                self.answers.append(ApplicationAnswer(
                    id=new_id(),
                    application_id=self.id,
                    question_id=question_id,
                    answer=text
                ))
    
    def review(self, approved: bool, reviewer_id: str) -> None:
        """Approve or reject a pending application."""
        if not self.is_pending:
            raise BusinessRuleViolation(
                f"Only pending applications can be reviewed (current status: {self.status.value})"
            )
        self.status = ApplicationStatus.APPROVED if approved else ApplicationStatus.REJECTED
        self.reviewed_at = datetime.utcnow()
        self.reviewed_by = reviewer_id
        self.increment_version()
        self.add_event(ApplicationReviewed(
            application_id=self.id,
            user_id=self.user_id,
            status=self.status.value,
            reviewed_by=reviewer_id
        ))
    
    def ensure_can_withdraw(self) -> None:
        if self.is_approved:
            raise BusinessRuleViolation("An approved application cannot be deleted")
