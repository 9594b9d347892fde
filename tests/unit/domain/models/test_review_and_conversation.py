"""
Unit tests for Review and Conversation domain models.
"""

import pytest
from app.domain.events.marketplace_events import ReviewSubmitted, ConversationStarted, MessageSent
from app.domain.models.base import ValidationError, BusinessRuleViolation, PermissionDeniedError
from app.domain.models.conversation import Conversation, Message
from app.domain.models.review import Review


class TestReview:
    """Test cases for Review model."""

    def test_create_review(self):
        """Test a review records the rating and raises an event."""
        review = Review.create("post-1", "buyer-1", 4, "Great work")

        assert review.rating == 4
        assert review.comment == "Great work"
        events = review.pull_events()
        assert isinstance(events[0], ReviewSubmitted)
        assert events[0].rating == 4

    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_rating_out_of_range(self, rating):
        """Test ratings must be between 1 and 5."""
        with pytest.raises(ValidationError) as exc_info:
            Review.create("post-1", "buyer-1", rating)
        assert exc_info.value.field == "rating"

    def test_empty_comment_becomes_none(self):
        """Test an empty comment is stored as no comment."""
        assert Review.create("post-1", "buyer-1", 5, "").comment is None

    def test_revise(self):
        """Test revising replaces rating and comment."""
        review = Review.create("post-1", "buyer-1", 2, "Slow")
        review.pull_events()

        review.revise(5, None)

        assert review.rating == 5
        assert review.comment is None
        assert review.pull_events()[0].updated is True

    def test_revise_validates(self):
        """Test a revision cannot set an invalid rating."""
        review = Review.create("post-1", "buyer-1", 3)

        with pytest.raises(ValidationError):
            review.revise(9)


class TestConversation:
    """Test cases for Conversation aggregate."""

    def test_start(self):
        """Test starting a conversation raises ConversationStarted."""
        conversation = Conversation.start("post-1", "buyer-1", "seller-1")

        assert conversation.key == ("post-1", "buyer-1", "seller-1")
        assert conversation.last_message_at is None
        events = conversation.pull_events()
        assert isinstance(events[0], ConversationStarted)
        assert events[0].freelancer_id == "seller-1"

    def test_cannot_talk_to_yourself(self):
        """Test buyer and freelancer must differ."""
        with pytest.raises(BusinessRuleViolation):
            Conversation.start("post-1", "user-1", "user-1")

    def test_participants(self):
        """Test participant helpers."""
        conversation = Conversation.start("post-1", "buyer-1", "seller-1")

        assert conversation.has_participant("buyer-1")
        assert not conversation.has_participant("other")
        assert conversation.counterpart_of("buyer-1") == "seller-1"
        assert conversation.counterpart_of("seller-1") == "buyer-1"
        assert conversation.role_of("buyer-1") == "buyer"
        assert conversation.role_of("seller-1") == "freelancer"

    def test_outsider_denied(self):
        """Test non-participants are rejected."""
        conversation = Conversation.start("post-1", "buyer-1", "seller-1")

        with pytest.raises(PermissionDeniedError):
            conversation.ensure_participant("other")
        with pytest.raises(PermissionDeniedError):
            conversation.record_message("other", "Hi")

    def test_record_message(self):
        """Test messages bump activity and carry the recipient in the event."""
        conversation = Conversation.start("post-1", "buyer-1", "seller-1")
        conversation.pull_events()

        message = conversation.record_message("buyer-1", "  Hello there  ")

        assert message.content == "Hello there"
        assert message.read is False
        assert message.conversation_id == conversation.id
        assert conversation.last_message_at == message.created_at
        event = conversation.pull_events()[0]
        assert isinstance(event, MessageSent)
        assert event.recipient_id == "seller-1"
        assert event.created_at == message.created_at.isoformat()

    def test_empty_message_rejected(self):
        """Test blank messages are invalid."""
        conversation = Conversation.start("post-1", "buyer-1", "seller-1")

        with pytest.raises(ValidationError):
            conversation.record_message("buyer-1", "   ")

    def test_message_length_limit(self):
        """Test messages are limited to 5000 characters."""
        with pytest.raises(ValidationError):
            Message(conversation_id="c-1", sender_id="buyer-1", content="x" * 5001)
