"""
Application mappers for the freelancer questionnaire and applications.
"""

from app.domain.models.application import (
    ApplicationQuestion, ApplicationAnswer, FreelancerApplication,
    ApplicationStatus, QuestionType
)
from app.infrastructure.db.models import (
    FreelancerQuestionModel, FreelancerApplicationModel, FreelancerApplicationAnswerModel
)


class QuestionMapper:
    """Maps between ApplicationQuestion and FreelancerQuestionModel."""
    
    def domain_to_model(self, question: ApplicationQuestion) -> FreelancerQuestionModel:
        model = FreelancerQuestionModel(id=question.id)
        self.update_model(model, question)
        return model
    
    def update_model(self, model: FreelancerQuestionModel, question: ApplicationQuestion) -> None:
        model.question = question.question
        model.order_position = question.order_position
        model.required = question.required
        model.type = question.type.value
        model.created_at = question.created_at
        model.updated_at = question.updated_at
    
    def model_to_domain(self, model: FreelancerQuestionModel) -> ApplicationQuestion:
        return ApplicationQuestion(
            id=model.id,
            question=model.question,
            order_position=model.order_position or 0,
            required=bool(model.required),
            type=QuestionType(model.type) if model.type else QuestionType.TEXTAREA,
            created_at=model.created_at,
            updated_at=model.updated_at
        )


class ApplicationMapper:
    """Maps between FreelancerApplication and its table rows."""
    
    def domain_to_model(self, application: FreelancerApplication) -> FreelancerApplicationModel:
        model = FreelancerApplicationModel(id=application.id)
        self.update_model(model, application)
        return model
    
    def update_model(self, model: FreelancerApplicationModel, application: FreelancerApplication) -> None:
        """Copy state and upsert answers keyed by question."""
        model.user_id = application.user_id
        model.status = application.status.value
        model.submitted_at = application.submitted_at
        model.reviewed_at = application.reviewed_at
        model.reviewed_by = application.reviewed_by
        model.version = application.version
        model.created_at = application.created_at
        model.updated_at = application.updated_at
        
        rows = {row.question_id: row for row in model.answers}
        for answer in application.answers:
            row = rows.get(answer.question_id)
            if row is None:
                model.answers.append(FreelancerApplicationAnswerModel(
                    id=answer.id,
                    question_id=answer.question_id,
                    answer=answer.answer,
                    created_at=answer.created_at,
                    updated_at=answer.updated_at
                ))
            elif row.answer != answer.answer:
                row.answer = answer.answer
                row.updated_at = answer.updated_at
    
    def model_to_domain(self, model: FreelancerApplicationModel) -> FreelancerApplication:
        return FreelancerApplication(
            id=model.id,
            user_id=model.user_id,
            status=ApplicationStatus(model.status) if model.status else ApplicationStatus.PENDING,
            submitted_at=model.submitted_at,
            reviewed_at=model.reviewed_at,
            reviewed_by=model.reviewed_by,
            answers=[
                ApplicationAnswer(
                    id=row.id,
                    application_id=model.id,
                    question_id=row.question_id,
                    answer=row.answer or "",
                    created_at=row.created_at,
                    updated_at=row.updated_at
                )
                for row in model.answers
            ],
            version=model.version or 1,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
