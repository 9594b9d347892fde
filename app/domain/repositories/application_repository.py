"""
Freelancer application repository interfaces.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from app.domain.models.application import (
    ApplicationQuestion, FreelancerApplication, ApplicationStatus
)


class QuestionRepository(ABC):
    """Repository interface for questionnaire questions."""
    
    @abstractmethod
    def save(self, question: ApplicationQuestion) -> ApplicationQuestion:
        pass
    
    @abstractmethod
    def find_by_id(self, question_id: str) -> Optional[ApplicationQuestion]:
        pass
    
    @abstractmethod
    def list_ordered(self) -> List[ApplicationQuestion]:
        """All questions ordered by position."""
        pass
    
    @abstractmethod
    def max_position(self) -> int:
        """Highest order position in use, -1 when there are no questions."""
        pass
    
    @abstractmethod
    def delete(self, question_id: str) -> bool:
        """Delete a question and the answers given to it."""
        pass


class ApplicationRepository(ABC):
    """Repository interface for the FreelancerApplication aggregate."""
    
    @abstractmethod
    def save(self, application: FreelancerApplication) -> FreelancerApplication:
        """Insert or update an application and upsert its answers."""
        pass
    
    @abstractmethod
    def find_by_id(self, application_id: str) -> Optional[FreelancerApplication]:
        pass
    
    @abstractmethod
    def find_by_user(self, user_id: str) -> Optional[FreelancerApplication]:
        pass
    
    @abstractmethod
    def list_applications(self, status: Optional[ApplicationStatus] = None) -> List[FreelancerApplication]:
        """List applications, most recently submitted first."""
        pass
    
    @abstractmethod
    def delete(self, application_id: str) -> bool:
        """Delete an application together with its answers."""
        pass
