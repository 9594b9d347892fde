"""
Shared fixtures: an in-memory SQLite database, repositories and an API client
whose Supabase-backed dependencies are replaced with mocks.
"""

from typing import Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.domain.events.base import get_event_dispatcher
from app.domain.models.application import ApplicationQuestion, FreelancerApplication
from app.domain.models.post import ServicePost
from app.domain.models.profile import Profile, UserRole, AccountStatus
from app.domain.models.review import Review
from app.infrastructure.auth import JWTHandler, get_auth_service
from app.infrastructure.db import models  # noqa: F401  (registers the tables)
from app.infrastructure.db.database import Base, get_db
from app.infrastructure.repositories import (
    SQLAlchemyProfileRepository,
    SQLAlchemyQuestionRepository,
    SQLAlchemyApplicationRepository,
    SQLAlchemyPostRepository,
    SQLAlchemyReviewRepository,
    SQLAlchemyConversationRepository
)
from app.infrastructure.web.dependencies import get_storage, get_session_factory
from app.main import app


@pytest.fixture(autouse=True)
def event_dispatcher():
    """Shared dispatcher without handlers, so published events stay in process."""
    dispatcher = get_event_dispatcher()
    dispatcher.clear_handlers()
    dispatcher.clear_event_log()
    yield dispatcher
    dispatcher.clear_handlers()
    dispatcher.clear_event_log()


@pytest.fixture
def engine():
    """Fresh in-memory database shared by every connection of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def repos(db_session):
    """All repositories bound to the test session."""
    class Repositories:
        profiles = SQLAlchemyProfileRepository(db_session)
        questions = SQLAlchemyQuestionRepository(db_session)
        applications = SQLAlchemyApplicationRepository(db_session)
        posts = SQLAlchemyPostRepository(db_session)
        reviews = SQLAlchemyReviewRepository(db_session)
        conversations = SQLAlchemyConversationRepository(db_session)
    return Repositories()


@pytest.fixture
def storage():
    """Storage service double that pretends every upload succeeds."""
    service = MagicMock()
    service.upload_image = AsyncMock(side_effect=lambda **kwargs: {
        "path": f"{kwargs['folder']}/{kwargs['user_id']}/{kwargs['filename']}",
        "public_url": f"https://cdn.example.com/{kwargs['folder']}/{kwargs['filename']}"
    })
    service.delete_by_url = AsyncMock(return_value=True)
    return service


@pytest.fixture
def auth_service():
    """Supabase Auth double."""
    service = MagicMock()
    service.list_user_emails.return_value = {}
    service.sign_out.return_value = True
    service.reset_password.return_value = True
    return service


@pytest.fixture
def client(session_factory, storage, auth_service, monkeypatch):
    """API client running against the in-memory database."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    monkeypatch.setattr(settings, "rate_limit_enabled", False)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def jwt_handler():
    return JWTHandler()


@pytest.fixture
def auth_headers(jwt_handler):
    """Build bearer headers for a Supabase-shaped token."""
    def build(user_id: str, email: Optional[str] = None, role: str = "buyer", **metadata) -> Dict[str, str]:
        token = jwt_handler.generate_test_token(
            user_id,
            email=email or f"{user_id}@example.com",
            role=role,
            metadata=metadata
        )
        return {"Authorization": f"Bearer {token}"}
    return build


class Seeder:
    """Inserts marketplace rows for a test."""

    def __init__(self, session):
        self.session = session

    def profile(
        self,
        user_id: str,
        role: UserRole = UserRole.BUYER,
        status: AccountStatus = AccountStatus.ACTIVE,
        username: Optional[str] = None,
        display_name: Optional[str] = None
    ) -> Profile:
        profile = Profile.create(user_id, UserRole.BUYER, username=username, display_name=display_name)
        profile.role = role
        profile.account_status = status
        SQLAlchemyProfileRepository(self.session).save(profile)
        self.session.commit()
        return profile

    def question(self, text: str = "Tell us about your work", position: int = 0, required: bool = True) -> ApplicationQuestion:
        question = ApplicationQuestion.create(text, position, required=required)
        SQLAlchemyQuestionRepository(self.session).save(question)
        self.session.commit()
        return question

    def approved_freelancer(self, user_id: str, display_name: Optional[str] = None) -> Profile:
        """Freelancer profile with an approved application."""
        profile = self.profile(user_id, UserRole.FREELANCER, display_name=display_name)
        questions = SQLAlchemyQuestionRepository(self.session).list_ordered() or [self.question()]
        application = FreelancerApplication.submit_new(
            user_id, questions, {question.id: "I design logos" for question in questions}
        )
        application.review(True, "admin-1")
        SQLAlchemyApplicationRepository(self.session).save(application)
        self.session.commit()
        return profile

    def post(self, user_id: str, title: str = "Logo design", publish: bool = True, **attrs) -> ServicePost:
        attrs.setdefault("content", "I will design a modern logo for your brand.")
        attrs.setdefault("price", 50.0)
        attrs.setdefault("category", "Design")
        post = ServicePost.create(user_id, title, **attrs)
        if publish:
            post.publish(settings.marketplace_categories)
        post.pull_events()
        SQLAlchemyPostRepository(self.session).save(post)
        self.session.commit()
        return post

    def review(self, post_id: str, user_id: str, rating: int, comment: Optional[str] = None) -> Review:
        review = Review.create(post_id, user_id, rating, comment)
        review.pull_events()
        SQLAlchemyReviewRepository(self.session).save(review)
        self.session.commit()
        return review


@pytest.fixture
def seed(db_session):
    return Seeder(db_session)
