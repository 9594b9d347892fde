"""
Initial marketplace schema.
Creates profiles, the freelancer questionnaire, posts, reviews and messaging tables.
"""

from alembic import op
import sqlalchemy as sa

revision = '0001_initial_marketplace_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    """Create marketplace tables."""
    
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('username', sa.String(30), unique=True),
        sa.Column('display_name', sa.String(50)),
        sa.Column('avatar_url', sa.String(500)),
        sa.Column('bio', sa.String(160)),
        sa.Column('role', sa.String(20), nullable=False, server_default='buyer'),
        sa.Column('account_status', sa.String(30), nullable=False, server_default='active'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),
        sa.CheckConstraint("role IN ('admin', 'buyer', 'freelancer')", name='check_profile_role'),
        sa.CheckConstraint(
            "account_status IN ('active', 'pending_approval', 'rejected', 'suspended')",
            name='check_profile_account_status'
        ),
    )
    op.create_index('ix_profiles_user_id', 'profiles', ['user_id'], unique=True)
    
    op.create_table(
        'freelancer_questions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('question', sa.Text(), nullable=False),
        sa.Column('order_position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('required', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('type', sa.String(20), nullable=False, server_default='textarea'),
        *_timestamps(),
    )
    
    op.create_table(
        'freelancer_applications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('submitted_at', sa.DateTime()),
        sa.Column('reviewed_at', sa.DateTime()),
        sa.Column('reviewed_by', sa.String(36)),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),
        sa.CheckConstraint("status IN ('pending', 'approved', 'rejected')", name='check_application_status'),
    )
    op.create_index('ix_freelancer_applications_user_id', 'freelancer_applications', ['user_id'], unique=True)
    op.create_index('idx_applications_status_submitted', 'freelancer_applications', ['status', 'submitted_at'])
    
    op.create_table(
        'freelancer_application_answers',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('application_id', sa.String(36),
                  sa.ForeignKey('freelancer_applications.id', ondelete='CASCADE'), nullable=False),
        sa.Column('question_id', sa.String(36),
                  sa.ForeignKey('freelancer_questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('answer', sa.Text(), nullable=False, server_default=''),
        *_timestamps(),
        sa.UniqueConstraint('application_id', 'question_id', name='unique_application_answer'),
    )
    
    op.create_table(
        'freelancer_posts',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('title', sa.String(120), nullable=False, server_default=''),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('price', sa.Numeric(12, 2)),
        sa.Column('category', sa.String(50)),
        sa.Column('cover_image_url', sa.String(500)),
        sa.Column('image_url', sa.String(500)),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft'),
        sa.Column('sections', sa.JSON(), nullable=False),
        sa.Column('packages', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),
        sa.CheckConstraint("status IN ('draft', 'published', 'archived')", name='check_post_status'),
        sa.CheckConstraint('price IS NULL OR price >= 0', name='check_post_price_non_negative'),
    )
    op.create_index('ix_freelancer_posts_user_id', 'freelancer_posts', ['user_id'])
    op.create_index('ix_freelancer_posts_category', 'freelancer_posts', ['category'])
    op.create_index('idx_posts_status_created', 'freelancer_posts', ['status', 'created_at'])
    op.create_index('idx_posts_owner_updated', 'freelancer_posts', ['user_id', 'updated_at'])
    
    op.create_table(
        'freelancer_post_reviews',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('post_id', sa.String(36),
                  sa.ForeignKey('freelancer_posts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text()),
        *_timestamps(),
        sa.UniqueConstraint('post_id', 'user_id', name='unique_review_per_user'),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='check_review_rating'),
    )
    op.create_index('idx_reviews_post_created', 'freelancer_post_reviews', ['post_id', 'created_at'])
    
    op.create_table(
        'conversations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('post_id', sa.String(36),
                  sa.ForeignKey('freelancer_posts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('buyer_id', sa.String(36), nullable=False),
        sa.Column('freelancer_id', sa.String(36), nullable=False),
        sa.Column('last_message_at', sa.DateTime()),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),
        sa.UniqueConstraint('post_id', 'buyer_id', 'freelancer_id', name='unique_conversation_participants'),
        sa.CheckConstraint('buyer_id <> freelancer_id', name='check_conversation_distinct_participants'),
    )
    op.create_index('ix_conversations_buyer_id', 'conversations', ['buyer_id'])
    op.create_index('ix_conversations_freelancer_id', 'conversations', ['freelancer_id'])
    
    op.create_table(
        'messages',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('conversation_id', sa.String(36),
                  sa.ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sender_id', sa.String(36), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('idx_messages_conversation_created', 'messages', ['conversation_id', 'created_at'])
    op.create_index('idx_messages_unread', 'messages', ['conversation_id', 'read', 'sender_id'])


def downgrade():
    """Drop marketplace tables."""
    op.drop_table('messages')
    op.drop_table('conversations')
    op.drop_table('freelancer_post_reviews')
    op.drop_table('freelancer_posts')
    op.drop_table('freelancer_application_answers')
    op.drop_table('freelancer_applications')
    op.drop_table('freelancer_questions')
    op.drop_table('profiles')
