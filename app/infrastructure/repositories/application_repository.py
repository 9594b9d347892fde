"""
Freelancer questionnaire and application repositories using SQLAlchemy.
"""

from typing import Optional, List
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.domain.models.application import ApplicationQuestion, FreelancerApplication, ApplicationStatus
from app.domain.models.base import DuplicateEntityError
from app.domain.repositories.application_repository import (
    QuestionRepository as QuestionRepositoryInterface,
    ApplicationRepository as ApplicationRepositoryInterface
)
from app.infrastructure.db.models import (
    FreelancerQuestionModel, FreelancerApplicationModel
)
from app.infrastructure.mappers.application_mapper import QuestionMapper, ApplicationMapper


class SQLAlchemyQuestionRepository(QuestionRepositoryInterface):
    """SQLAlchemy implementation of the questionnaire repository."""
    
    def __init__(self, session: Session):
        self.session = session
        self.mapper = QuestionMapper()
        self.model = FreelancerQuestionModel
    
    def save(self, question: ApplicationQuestion) -> ApplicationQuestion:
        model = self.session.get(FreelancerQuestionModel, question.id)
        if model is None:
            self.session.add(self.mapper.domain_to_model(question))
        else:
            self.mapper.update_model(model, question)
        self.session.flush()
        return question
    
    def find_by_id(self, question_id: str) -> Optional[ApplicationQuestion]:
        model = self.session.get(FreelancerQuestionModel, question_id)
        return self.mapper.model_to_domain(model) if model else None
    
    def list_ordered(self) -> List[ApplicationQuestion]:
        models = self.session.query(FreelancerQuestionModel).order_by(
            FreelancerQuestionModel.order_position.asc(),
            FreelancerQuestionModel.created_at.asc()
        ).all()
        return [self.mapper.model_to_domain(model) for model in models]
    
    def max_position(self) -> int:
        value = self.session.query(func.max(FreelancerQuestionModel.order_position)).scalar()
        return -1 if value is None else value
    
    def delete(self, question_id: str) -> bool:
        model = self.session.get(FreelancerQuestionModel, question_id)
        if not model:
            return False
        self.session.delete(model)
        self.session.flush()
        return True


class SQLAlchemyApplicationRepository(ApplicationRepositoryInterface):
    """SQLAlchemy implementation of the application repository."""
    
    def __init__(self, session: Session):
        self.session = session
        self.mapper = ApplicationMapper()
        self.model = FreelancerApplicationModel
    
    def _query(self):
        return self.session.query(FreelancerApplicationModel).options(
            selectinload(FreelancerApplicationModel.answers)
        )
    
    def save(self, application: FreelancerApplication) -> FreelancerApplication:
        """Insert or update an application and upsert its answers."""
        try:
            with self.session.begin_nested():
                model = self._query().filter_by(id=application.id).first()
                if model is None:
                    self.session.add(self.mapper.domain_to_model(application))
                else:
                    self.mapper.update_model(model, application)
        except IntegrityError:
            raise DuplicateEntityError("FreelancerApplication", "user_id", application.user_id)
        return application
    
    def find_by_id(self, application_id: str) -> Optional[FreelancerApplication]:
        model = self._query().filter_by(id=application_id).first()
        return self.mapper.model_to_domain(model) if model else None
    
    def find_by_user(self, user_id: str) -> Optional[FreelancerApplication]:
        model = self._query().filter_by(user_id=user_id).first()
        return self.mapper.model_to_domain(model) if model else None
    
    def list_applications(self, status: Optional[ApplicationStatus] = None) -> List[FreelancerApplication]:
        query = self._query()
        if status is not None:
            query = query.filter(FreelancerApplicationModel.status == ApplicationStatus(status).value)
        models = query.order_by(FreelancerApplicationModel.submitted_at.desc()).all()
        return [self.mapper.model_to_domain(model) for model in models]
    
    def delete(self, application_id: str) -> bool:
        """Delete the application; its answers go with it."""
        model = self._query().filter_by(id=application_id).first()
        if not model:
            return False
        self.session.delete(model)
        self.session.flush()
        return True
