"""
Messaging use cases for the application layer.
Conversations between a buyer and the freelancer who owns a post.
"""

import logging
from typing import List

from app.application.use_cases.base_use_case import (
    CreateUseCase, UpdateUseCase, QueryUseCase, AuthorizedUseCase
)
from app.application.use_cases.profile_use_cases import load_profile, profile_cards
from app.application.dto.messaging_dto import (
    OpenConversationRequestDTO, StartConversationRequestDTO, SendMessageRequestDTO,
    ListConversationsRequestDTO, ChatMessageResponseDTO, ConversationResponseDTO,
    ConversationMessagesResponseDTO, StartConversationResponseDTO, MarkReadResponseDTO
)
from app.domain.events.marketplace_events import MessagesRead
from app.domain.models.base import EntityNotFoundError, BusinessRuleViolation
from app.domain.models.conversation import Conversation, Message
from app.domain.repositories.conversation_repository import ConversationRepository
from app.domain.repositories.post_repository import PostRepository
from app.domain.repositories.profile_repository import ProfileRepository


logger = logging.getLogger(__name__)


class ConversationAccessMixin:
    """Loading conversations for participants and rendering them for one viewer."""

    conversation_repository: ConversationRepository
    post_repository: PostRepository
    profile_repository: ProfileRepository

    def _load_conversation(self, conversation_id: str) -> Conversation:
        conversation = self.conversation_repository.find_by_id(conversation_id)
        if conversation is None:
            raise EntityNotFoundError("Conversation", conversation_id)
        conversation.ensure_participant(self.current_user_id)
        return conversation

    def _render(self, conversations: List[Conversation]) -> List[ConversationResponseDTO]:
        if not conversations:
            return []

        ids = [conversation.id for conversation in conversations]
        cards = profile_cards(
            self.profile_repository,
            [conversation.counterpart_of(self.current_user_id) for conversation in conversations]
        )
        titles = {}
        for post_id in {conversation.post_id for conversation in conversations}:
            post = self.post_repository.find_by_id(post_id)
            titles[post_id] = post.title if post else None
        latest = self.conversation_repository.latest_messages(ids)
        unread = self.conversation_repository.unread_counts(ids, self.current_user_id)

        return [
            ConversationResponseDTO.from_domain(
                conversation,
                viewer_id=self.current_user_id,
                counterpart=cards[conversation.counterpart_of(self.current_user_id)],
                post_title=titles.get(conversation.post_id),
                last_message=latest.get(conversation.id),
                unread_count=unread.get(conversation.id, 0)
            )
            for conversation in conversations
        ]


class GetOrCreateConversationUseCase(
    ConversationAccessMixin, AuthorizedUseCase,
    CreateUseCase[OpenConversationRequestDTO, StartConversationResponseDTO]
):
    """
    Use case for opening the conversation about a post.
    The caller takes the buyer side; the freelancer must own the post.
    Reopening returns the existing conversation.
    """

    def __init__(
        self,
        conversation_repository: ConversationRepository,
        post_repository: PostRepository,
        profile_repository: ProfileRepository
    ):
        super().__init__()
        self.conversation_repository = conversation_repository
        self.post_repository = post_repository
        self.profile_repository = profile_repository

    async def _execute_command_logic(self, request: OpenConversationRequestDTO) -> StartConversationResponseDTO:
        conversation, created = self._open(request)
        return StartConversationResponseDTO(
            conversation=self._render([conversation])[0],
            created=created
        )

    def _open(self, request: OpenConversationRequestDTO) -> tuple[Conversation, bool]:
        if request.freelancer_id == self.current_user_id:
            raise BusinessRuleViolation("You cannot start a conversation with yourself")

        load_profile(self.profile_repository, self.current_user_id).ensure_can_act()
        post = self.post_repository.find_by_id(request.post_id)
        if post is None or not post.is_published:
            raise EntityNotFoundError("Post", request.post_id)
        if not post.is_owned_by(request.freelancer_id):
            raise BusinessRuleViolation("The freelancer does not own this post")

        candidate = Conversation.start(
            post_id=post.id,
            buyer_id=self.current_user_id,
            freelancer_id=request.freelancer_id
        )
        conversation, created = self.conversation_repository.get_or_create(candidate)
        if created:
            self._collect_events(candidate)
            logger.info(f"Conversation {conversation.id} opened by {self.current_user_id} on post {post.id}")
        else:
            candidate.pull_events()
        return conversation, created


class StartConversationWithMessageUseCase(GetOrCreateConversationUseCase):
    """Use case for opening a conversation and sending its first message in one step."""

    async def _execute_command_logic(self, request: StartConversationRequestDTO) -> StartConversationResponseDTO:
        conversation, created = self._open(request)
        message = conversation.record_message(self.current_user_id, request.content)
        self.conversation_repository.add_message(message)
        self.conversation_repository.save(conversation)
        self._collect_events(conversation)

        return StartConversationResponseDTO(
            conversation=self._render([conversation])[0],
            created=created,
            message=ChatMessageResponseDTO.from_domain(message)
        )


class ListConversationsUseCase(
    ConversationAccessMixin, AuthorizedUseCase,
    QueryUseCase[ListConversationsRequestDTO, List[ConversationResponseDTO]]
):
    """Use case for the caller's inbox, most recent activity first."""

    def __init__(
        self,
        conversation_repository: ConversationRepository,
        post_repository: PostRepository,
        profile_repository: ProfileRepository
    ):
        super().__init__()
        self.conversation_repository = conversation_repository
        self.post_repository = post_repository
        self.profile_repository = profile_repository

    async def _execute_business_logic(self, request: ListConversationsRequestDTO) -> List[ConversationResponseDTO]:
        conversations = self.conversation_repository.list_for_user(self.current_user_id, request.role)
        return self._render(conversations)


class GetMessagesUseCase(
    ConversationAccessMixin, AuthorizedUseCase,
    UpdateUseCase[str, ConversationMessagesResponseDTO]
):
    """
    Use case for opening a thread.
    Reading the thread marks the counterpart's messages as read.
    """

    def __init__(
        self,
        conversation_repository: ConversationRepository,
        post_repository: PostRepository,
        profile_repository: ProfileRepository
    ):
        super().__init__()
        self.conversation_repository = conversation_repository
        self.post_repository = post_repository
        self.profile_repository = profile_repository

    async def _execute_command_logic(self, conversation_id: str) -> ConversationMessagesResponseDTO:
        conversation = self._load_conversation(conversation_id)

        marked = self.conversation_repository.mark_messages_as_read(conversation.id, self.current_user_id)
        if marked:
            self.events.append(MessagesRead(
                conversation_id=conversation.id,
                reader_id=self.current_user_id,
                count=marked
            ))
        messages = self.conversation_repository.list_messages(conversation.id)

        return ConversationMessagesResponseDTO(
            conversation=self._render([conversation])[0],
            messages=[ChatMessageResponseDTO.from_domain(message) for message in messages],
            marked_read=marked
        )


class SendMessageUseCase(
    ConversationAccessMixin, AuthorizedUseCase,
    CreateUseCase[SendMessageRequestDTO, ChatMessageResponseDTO]
):
    """Use case for sending a message in a conversation."""

    def __init__(
        self,
        conversation_repository: ConversationRepository,
        post_repository: PostRepository,
        profile_repository: ProfileRepository
    ):
        super().__init__()
        self.conversation_repository = conversation_repository
        self.post_repository = post_repository
        self.profile_repository = profile_repository

    async def _execute_command_logic(self, request: SendMessageRequestDTO) -> ChatMessageResponseDTO:
        conversation = self._load_conversation(request.conversation_id)
        load_profile(self.profile_repository, self.current_user_id).ensure_can_act()

        message: Message = conversation.record_message(self.current_user_id, request.content)
        self.conversation_repository.add_message(message)
        self.conversation_repository.save(conversation)
        self._collect_events(conversation)
        return ChatMessageResponseDTO.from_domain(message)


class MarkReadUseCase(
    ConversationAccessMixin, AuthorizedUseCase,
    UpdateUseCase[str, MarkReadResponseDTO]
):
    """Use case for marking the counterpart's messages as read."""

    def __init__(self, conversation_repository: ConversationRepository):
        super().__init__()
        self.conversation_repository = conversation_repository

    async def _execute_command_logic(self, conversation_id: str) -> MarkReadResponseDTO:
        conversation = self._load_conversation(conversation_id)
        marked = self.conversation_repository.mark_messages_as_read(conversation.id, self.current_user_id)
        if marked:
            self.events.append(MessagesRead(
                conversation_id=conversation.id,
                reader_id=self.current_user_id,
                count=marked
            ))
        return MarkReadResponseDTO(conversation_id=conversation.id, marked_read=marked)
