"""
SQLAlchemy models for the database.
Maps domain entities to the marketplace tables.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, Boolean,
    Numeric, ForeignKey, JSON, Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


REQUIRED_TABLES = [
    "profiles",
    "freelancer_questions",
    "freelancer_applications",
    "freelancer_application_answers",
    "freelancer_posts",
    "freelancer_post_reviews",
    "conversations",
    "messages",
]


class ProfileModel(Base):
    """Profile table - one row per Supabase auth user"""
    __tablename__ = 'profiles'
    
    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False, unique=True, index=True)
    username = Column(String(30), unique=True)
    display_name = Column(String(50))
    avatar_url = Column(String(500))
    bio = Column(String(160))
    role = Column(String(20), nullable=False, default='buyer')
    account_status = Column(String(30), nullable=False, default='active')
    version = Column(Integer, nullable=False, default=1)
    
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
    
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'buyer', 'freelancer')", name='check_profile_role'),
        CheckConstraint(
            "account_status IN ('active', 'pending_approval', 'rejected', 'suspended')",
            name='check_profile_account_status'
        ),
    )


class FreelancerQuestionModel(Base):
    """Questionnaire shown to freelancer applicants"""
    __tablename__ = 'freelancer_questions'
    
    id = Column(String(36), primary_key=True)
    question = Column(Text, nullable=False)
    order_position = Column(Integer, nullable=False, default=0)
    required = Column(Boolean, nullable=False, default=True)
    type = Column(String(20), nullable=False, default='textarea')
    
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
    
    answers = relationship(
        "FreelancerApplicationAnswerModel",
        back_populates="question",
        cascade="all, delete-orphan"
    )


class FreelancerApplicationModel(Base):
    """Freelancer application table"""
    __tablename__ = 'freelancer_applications'
    
    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False, unique=True, index=True)
    status = Column(String(20), nullable=False, default='pending')
    submitted_at = Column(DateTime)
    reviewed_at = Column(DateTime)
    reviewed_by = Column(String(36))
    version = Column(Integer, nullable=False, default=1)
    
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
    
    answers = relationship(
        "FreelancerApplicationAnswerModel",
        back_populates="application",
        cascade="all, delete-orphan"
    )
    
    __table_args__ = (
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name='check_application_status'),
        Index('idx_applications_status_submitted', 'status', 'submitted_at'),
    )


class FreelancerApplicationAnswerModel(Base):
    """Answer given to one question of an application"""
    __tablename__ = 'freelancer_application_answers'
    
    id = Column(String(36), primary_key=True)
    application_id = Column(
        String(36), ForeignKey('freelancer_applications.id', ondelete='CASCADE'), nullable=False
    )
    question_id = Column(
        String(36), ForeignKey('freelancer_questions.id', ondelete='CASCADE'), nullable=False
    )
    answer = Column(Text, nullable=False, default='')
    
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
    
    application = relationship("FreelancerApplicationModel", back_populates="answers")
    question = relationship("FreelancerQuestionModel", back_populates="answers")
    
    __table_args__ = (
        UniqueConstraint('application_id', 'question_id', name='unique_application_answer'),
    )


class FreelancerPostModel(Base):
    """Service post table"""
    __tablename__ = 'freelancer_posts'
    
    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)
    title = Column(String(120), nullable=False, default='')
    content = Column(Text, nullable=False, default='')
    price = Column(Numeric(12, 2))
    category = Column(String(50), index=True)
    cover_image_url = Column(String(500))
    image_url = Column(String(500))
    status = Column(String(20), nullable=False, default='draft')
    sections = Column(JSON, nullable=False, default=list)
    packages = Column(JSON, nullable=False, default=dict)
    version = Column(Integer, nullable=False, default=1)
    
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
    
    reviews = relationship(
        "FreelancerPostReviewModel",
        back_populates="post",
        cascade="all, delete-orphan"
    )
    conversations = relationship(
        "ConversationModel",
        back_populates="post",
        cascade="all, delete-orphan"
    )
    
    __table_args__ = (
        CheckConstraint("status IN ('draft', 'published', 'archived')", name='check_post_status'),
        CheckConstraint('price IS NULL OR price >= 0', name='check_post_price_non_negative'),
        Index('idx_posts_status_created', 'status', 'created_at'),
        Index('idx_posts_owner_updated', 'user_id', 'updated_at'),
    )


class FreelancerPostReviewModel(Base):
    """Buyer review of a post"""
    __tablename__ = 'freelancer_post_reviews'
    
    id = Column(String(36), primary_key=True)
    post_id = Column(String(36), ForeignKey('freelancer_posts.id', ondelete='CASCADE'), nullable=False)
    user_id = Column(String(36), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text)
    
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
    
    post = relationship("FreelancerPostModel", back_populates="reviews")
    
    __table_args__ = (
        UniqueConstraint('post_id', 'user_id', name='unique_review_per_user'),
        CheckConstraint('rating BETWEEN 1 AND 5', name='check_review_rating'),
        Index('idx_reviews_post_created', 'post_id', 'created_at'),
    )


class ConversationModel(Base):
    """Buyer-freelancer conversation about a post"""
    __tablename__ = 'conversations'
    
    id = Column(String(36), primary_key=True)
    post_id = Column(String(36), ForeignKey('freelancer_posts.id', ondelete='CASCADE'), nullable=False)
    buyer_id = Column(String(36), nullable=False, index=True)
    freelancer_id = Column(String(36), nullable=False, index=True)
    last_message_at = Column(DateTime)
    version = Column(Integer, nullable=False, default=1)
    
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
    
    post = relationship("FreelancerPostModel", back_populates="conversations")
    messages = relationship(
        "MessageModel",
        back_populates="conversation",
        cascade="all, delete-orphan"
    )
    
    __table_args__ = (
        UniqueConstraint('post_id', 'buyer_id', 'freelancer_id', name='unique_conversation_participants'),
        CheckConstraint('buyer_id <> freelancer_id', name='check_conversation_distinct_participants'),
    )


class MessageModel(Base):
    """Chat message table"""
    __tablename__ = 'messages'
    
    id = Column(String(36), primary_key=True)
    conversation_id = Column(
        String(36), ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False
    )
    sender_id = Column(String(36), nullable=False)
    content = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    
    conversation = relationship("ConversationModel", back_populates="messages")
    
    __table_args__ = (
        Index('idx_messages_conversation_created', 'conversation_id', 'created_at'),
        Index('idx_messages_unread', 'conversation_id', 'read', 'sender_id'),
    )


def create_all_tables(engine):
    """Create all tables in the database"""
    Base.metadata.create_all(bind=engine)
