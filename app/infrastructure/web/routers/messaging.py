"""
Messaging router.
Conversations between buyers and freelancers, plus a WebSocket feed per conversation.
"""

import logging
from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status

from app.infrastructure.auth import AuthenticatedUser, JWTHandler, get_current_user, get_jwt_handler
from app.infrastructure.events.realtime import ConnectionManager, get_connection_manager
from app.infrastructure.rate_limiting import message_rate_limit
from app.infrastructure.repositories.conversation_repository import SQLAlchemyConversationRepository
from app.infrastructure.web.dependencies import (
    ConversationRepo, PostRepo, ProfileRepo, Outbox, get_session_factory, unwrap_result
)
from app.application.use_cases.messaging_use_cases import (
    GetOrCreateConversationUseCase,
    StartConversationWithMessageUseCase,
    ListConversationsUseCase,
    GetMessagesUseCase,
    SendMessageUseCase,
    MarkReadUseCase
)
from app.application.dto.messaging_dto import (
    OpenConversationRequestDTO,
    StartConversationRequestDTO,
    SendMessageRequestDTO,
    ListConversationsRequestDTO,
    ChatMessageResponseDTO,
    ConversationResponseDTO,
    ConversationMessagesResponseDTO,
    StartConversationResponseDTO,
    MarkReadResponseDTO
)
from app.domain.models.base import ValidationError


logger = logging.getLogger(__name__)

router = APIRouter()

# Application-defined WebSocket close codes
WS_UNAUTHORIZED = 4401
WS_FORBIDDEN = 4403


@router.get("/conversations", response_model=List[ConversationResponseDTO])
async def list_conversations(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    conversations: ConversationRepo,
    posts: PostRepo,
    profiles: ProfileRepo,
    role: Optional[str] = Query(None, pattern="^(buyer|freelancer)$", description="Only conversations where you have this role")
):
    """
    List the caller's conversations, most recent activity first.

    - **role**: Optional buyer or freelancer filter
    """
    use_case = ListConversationsUseCase(conversations, posts, profiles).set_current_user(user.user_id, user.roles)
    return unwrap_result(await use_case.execute(ListConversationsRequestDTO(role=role)))


@router.post("/conversations", response_model=StartConversationResponseDTO)
async def open_conversation(
    request: OpenConversationRequestDTO,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    conversations: ConversationRepo,
    posts: PostRepo,
    profiles: ProfileRepo
):
    """
    Open the conversation about a post with its freelancer, reusing it when it exists.

    - **post_id**: Published post the conversation is about
    - **freelancer_id**: Owner of the post
    """
    use_case = GetOrCreateConversationUseCase(conversations, posts, profiles).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(request))


@router.post("/conversations/start", status_code=status.HTTP_201_CREATED, response_model=StartConversationResponseDTO)
async def start_conversation(
    request: StartConversationRequestDTO,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    conversations: ConversationRepo,
    posts: PostRepo,
    profiles: ProfileRepo,
    _: None = Depends(message_rate_limit)
):
    """
    Open the conversation about a post and send the first message.

    - **post_id**: Published post the conversation is about
    - **freelancer_id**: Owner of the post
    - **content**: Message text, 1-5000 characters
    """
    use_case = StartConversationWithMessageUseCase(conversations, posts, profiles).set_current_user(
        user.user_id, user.roles
    )
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(request))


@router.get("/conversations/{conversation_id}/messages", response_model=ConversationMessagesResponseDTO)
async def get_messages(
    conversation_id: str,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    conversations: ConversationRepo,
    posts: PostRepo,
    profiles: ProfileRepo
):
    """
    Get a conversation thread, oldest message first.

    Opening the thread marks the counterpart's messages as read.
    """
    use_case = GetMessagesUseCase(conversations, posts, profiles).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(conversation_id))


@router.post(
    "/conversations/{conversation_id}/messages",
    status_code=status.HTTP_201_CREATED,
    response_model=ChatMessageResponseDTO
)
async def send_message(
    conversation_id: str,
    request: SendMessageRequestDTO,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    conversations: ConversationRepo,
    posts: PostRepo,
    profiles: ProfileRepo,
    _: None = Depends(message_rate_limit)
):
    """
    Send a message in a conversation.

    - **content**: Message text, 1-5000 characters
    """
    request.conversation_id = conversation_id
    use_case = SendMessageUseCase(conversations, posts, profiles).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(request))


@router.post("/conversations/{conversation_id}/read", response_model=MarkReadResponseDTO)
async def mark_read(
    conversation_id: str,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    conversations: ConversationRepo
):
    """
    Mark the counterpart's messages in a conversation as read.
    """
    use_case = MarkReadUseCase(conversations).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(conversation_id))


@router.websocket("/ws/{conversation_id}")
async def conversation_feed(
    websocket: WebSocket,
    conversation_id: str,
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)],
    manager: Annotated[ConnectionManager, Depends(get_connection_manager)],
    session_factory=Depends(get_session_factory),
    token: str = Query("", description="Supabase access token")
):
    """
    Stream message.created and messages.read events of a conversation.

    Browsers cannot set headers on WebSockets, so the access token comes in the query string.
    """
    try:
        user_id = jwt_handler.get_user_id(token)
    except ValidationError:
        await websocket.close(code=WS_UNAUTHORIZED)
        return

    session = session_factory()
    try:
        conversation = SQLAlchemyConversationRepository(session).find_by_id(conversation_id)
    finally:
        session.close()
    if conversation is None or not conversation.has_participant(user_id):
        await websocket.close(code=WS_FORBIDDEN)
        return

    await manager.connect(conversation_id, user_id, websocket)
    try:
        while True:
            # clients only listen; incoming frames keep the connection alive
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug(f"User {user_id} left conversation {conversation_id}")
    finally:
        manager.disconnect(conversation_id, user_id, websocket)
