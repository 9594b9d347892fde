"""
Unit tests for messaging use cases.
"""

import pytest
from app.application.dto.messaging_dto import (
    OpenConversationRequestDTO, StartConversationRequestDTO, SendMessageRequestDTO,
    ListConversationsRequestDTO
)
from app.application.use_cases.messaging_use_cases import (
    GetOrCreateConversationUseCase,
    StartConversationWithMessageUseCase,
    ListConversationsUseCase,
    GetMessagesUseCase,
    SendMessageUseCase,
    MarkReadUseCase
)
from app.domain.events.base import EventOutbox
from app.domain.models.profile import AccountStatus, UserRole


class TestOpenConversation:
    """Test cases for opening conversations about a post."""

    def setup_method(self):
        """Set up test fixtures."""
        self.buyer = ("buyer-1", ["buyer"])

    async def _open(self, repos, post_id, freelancer_id, user=None):
        use_case = GetOrCreateConversationUseCase(repos.conversations, repos.posts, repos.profiles)
        return await use_case.set_current_user(*(user or self.buyer)).execute(
            OpenConversationRequestDTO(post_id=post_id, freelancer_id=freelancer_id)
        )

    @pytest.mark.asyncio
    async def test_open_and_reopen(self, repos, seed, event_dispatcher):
        """Test reopening returns the same conversation."""
        seed.profile("buyer-1")
        seed.profile("seller-1", UserRole.FREELANCER, display_name="Jane Doe")
        post = seed.post("seller-1", "Logo design")

        first = await self._open(repos, post.id, "seller-1")
        second = await self._open(repos, post.id, "seller-1")

        assert first.data.created is True
        assert second.data.created is False
        assert second.data.conversation.id == first.data.conversation.id
        assert first.data.conversation.role == "buyer"
        assert first.data.conversation.counterpart.display_name == "Jane Doe"
        assert first.data.conversation.post_title == "Logo design"
        started = [entry for entry in event_dispatcher.get_event_log() if entry["event_type"] == "ConversationStarted"]
        assert len(started) == 1

    @pytest.mark.asyncio
    async def test_deferred_events_wait_in_the_outbox(self, repos, seed, event_dispatcher):
        """Test a use case bound to an outbox leaves publishing to it."""
        seed.profile("seller-1", UserRole.FREELANCER)
        post = seed.post("seller-1")
        outbox = EventOutbox()
        use_case = GetOrCreateConversationUseCase(repos.conversations, repos.posts, repos.profiles)
        use_case.set_current_user(*self.buyer).defer_events(outbox)

        result = await use_case.execute(OpenConversationRequestDTO(post_id=post.id, freelancer_id="seller-1"))

        assert result.success is True
        assert event_dispatcher.get_event_log() == []
        assert [event.event_type for event in outbox.pending] == ["ConversationStarted"]

    @pytest.mark.asyncio
    async def test_failed_command_adds_nothing_to_the_outbox(self, repos, seed):
        seed.profile("seller-1", UserRole.FREELANCER)
        post = seed.post("seller-1")
        outbox = EventOutbox()
        use_case = GetOrCreateConversationUseCase(repos.conversations, repos.posts, repos.profiles)
        use_case.set_current_user("seller-1", ["freelancer"]).defer_events(outbox)

        result = await use_case.execute(OpenConversationRequestDTO(post_id=post.id, freelancer_id="seller-1"))

        assert result.success is False
        assert outbox.pending == []

    @pytest.mark.asyncio
    async def test_cannot_talk_to_yourself(self, repos, seed):
        """Test the freelancer cannot open a conversation on their own post."""
        seed.profile("seller-1", UserRole.FREELANCER)
        post = seed.post("seller-1")

        result = await self._open(repos, post.id, "seller-1", user=("seller-1", ["freelancer"]))

        assert result.error_code == "BUSINESS_RULE_VIOLATION"

    @pytest.mark.asyncio
    async def test_freelancer_must_own_post(self, repos, seed):
        """Test the freelancer id must match the post owner."""
        seed.profile("buyer-1")
        post = seed.post("seller-1")

        result = await self._open(repos, post.id, "seller-2")

        assert result.error_code == "BUSINESS_RULE_VIOLATION"

    @pytest.mark.asyncio
    async def test_unpublished_post_is_not_found(self, repos, seed):
        """Test drafts cannot be discussed."""
        seed.profile("buyer-1")
        post = seed.post("seller-1", publish=False)

        result = await self._open(repos, post.id, "seller-1")

        assert result.error_code == "ENTITY_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_suspended_buyer_cannot_open(self, repos, seed):
        """Test suspended accounts cannot contact freelancers."""
        seed.profile("buyer-1", status=AccountStatus.SUSPENDED)
        post = seed.post("seller-1")

        result = await self._open(repos, post.id, "seller-1")

        assert result.error_code == "BUSINESS_RULE_VIOLATION"

    @pytest.mark.asyncio
    async def test_start_with_first_message(self, repos, seed):
        """Test opening a conversation and sending the first message at once."""
        seed.profile("buyer-1")
        post = seed.post("seller-1")
        use_case = StartConversationWithMessageUseCase(repos.conversations, repos.posts, repos.profiles)

        result = await use_case.set_current_user(*self.buyer).execute(StartConversationRequestDTO(
            post_id=post.id, freelancer_id="seller-1", content="  Hi, are you available?  "
        ))

        assert result.success is True
        assert result.data.created is True
        assert result.data.message.content == "Hi, are you available?"
        assert result.data.message.sender_id == "buyer-1"
        assert result.data.conversation.last_message.id == result.data.message.id


class TestConversationMessages:
    """Test cases for sending and reading messages."""

    async def _conversation(self, repos, seed):
        seed.profile("buyer-1")
        seed.profile("seller-1", UserRole.FREELANCER)
        post = seed.post("seller-1")
        opened = await GetOrCreateConversationUseCase(
            repos.conversations, repos.posts, repos.profiles
        ).set_current_user("buyer-1", ["buyer"]).execute(
            OpenConversationRequestDTO(post_id=post.id, freelancer_id="seller-1")
        )
        return opened.data.conversation.id

    async def _send(self, repos, user_id, conversation_id, content):
        use_case = SendMessageUseCase(repos.conversations, repos.posts, repos.profiles)
        return await use_case.set_current_user(user_id, ["buyer"]).execute(
            SendMessageRequestDTO(conversation_id=conversation_id, content=content)
        )

    @pytest.mark.asyncio
    async def test_unread_counts_and_reading(self, repos, seed, event_dispatcher):
        """Test opening the thread marks the counterpart's messages read."""
        conversation_id = await self._conversation(repos, seed)
        await self._send(repos, "buyer-1", conversation_id, "Hello")
        await self._send(repos, "buyer-1", conversation_id, "Are you there?")

        inbox = await ListConversationsUseCase(repos.conversations, repos.posts, repos.profiles).set_current_user(
            "seller-1", ["freelancer"]
        ).execute(ListConversationsRequestDTO())
        thread = await GetMessagesUseCase(repos.conversations, repos.posts, repos.profiles).set_current_user(
            "seller-1", ["freelancer"]
        ).execute(conversation_id)

        assert inbox.data[0].unread_count == 2
        assert inbox.data[0].role == "freelancer"
        assert thread.data.marked_read == 2
        assert {message.content for message in thread.data.messages} == {"Hello", "Are you there?"}
        assert all(message.read for message in thread.data.messages)
        assert event_dispatcher.get_event_log(limit=1)[0]["event_type"] == "MessagesRead"

    @pytest.mark.asyncio
    async def test_own_messages_stay_unread(self, repos, seed):
        """Test the sender cannot mark their own messages read."""
        conversation_id = await self._conversation(repos, seed)
        await self._send(repos, "buyer-1", conversation_id, "Hello")

        result = await MarkReadUseCase(repos.conversations).set_current_user("buyer-1", ["buyer"]).execute(
            conversation_id
        )
        by_recipient = await MarkReadUseCase(repos.conversations).set_current_user(
            "seller-1", ["freelancer"]
        ).execute(conversation_id)

        assert result.data.marked_read == 0
        assert by_recipient.data.marked_read == 1

    @pytest.mark.asyncio
    async def test_outsiders_are_denied(self, repos, seed):
        """Test only participants read or write."""
        conversation_id = await self._conversation(repos, seed)

        send = await self._send(repos, "buyer-2", conversation_id, "Let me in")
        read = await GetMessagesUseCase(repos.conversations, repos.posts, repos.profiles).set_current_user(
            "buyer-2", ["buyer"]
        ).execute(conversation_id)

        assert send.error_code == "PERMISSION_DENIED"
        assert read.error_code == "PERMISSION_DENIED"

    @pytest.mark.asyncio
    async def test_list_by_role(self, repos, seed):
        """Test the inbox can be split by the caller's side."""
        conversation_id = await self._conversation(repos, seed)

        as_buyer = await ListConversationsUseCase(repos.conversations, repos.posts, repos.profiles).set_current_user(
            "buyer-1", ["buyer"]
        ).execute(ListConversationsRequestDTO(role="buyer"))
        as_freelancer = await ListConversationsUseCase(
            repos.conversations, repos.posts, repos.profiles
        ).set_current_user("buyer-1", ["buyer"]).execute(ListConversationsRequestDTO(role="freelancer"))

        assert [item.id for item in as_buyer.data] == [conversation_id]
        assert as_freelancer.data == []

    @pytest.mark.asyncio
    async def test_missing_conversation(self, repos):
        """Test unknown conversations are not found."""
        result = await MarkReadUseCase(repos.conversations).set_current_user("buyer-1", ["buyer"]).execute("nope")

        assert result.error_code == "ENTITY_NOT_FOUND"
