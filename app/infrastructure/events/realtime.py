"""
Realtime delivery of messaging events over WebSockets.
Clients subscribe to one conversation; events are pushed to its participants.
"""

import logging
from typing import Any, Dict, List, Set, Tuple

from fastapi import WebSocket

from app.domain.events.base import EventHandler, DomainEvent
from app.domain.events.marketplace_events import ConversationStarted, MessageSent, MessagesRead


logger = logging.getLogger(__name__)


class ConnectionManager:
    """Open WebSocket connections grouped by conversation."""

    def __init__(self):
        self._connections: Dict[str, Set[Tuple[str, WebSocket]]] = {}

    async def connect(self, conversation_id: str, user_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.setdefault(conversation_id, set()).add((user_id, websocket))
        logger.debug(f"User {user_id} subscribed to conversation {conversation_id}")

    def disconnect(self, conversation_id: str, user_id: str, websocket: WebSocket) -> None:
        subscribers = self._connections.get(conversation_id)
        if not subscribers:
            return
        subscribers.discard((user_id, websocket))
        if not subscribers:
            del self._connections[conversation_id]

    def subscriber_count(self, conversation_id: str) -> int:
        return len(self._connections.get(conversation_id, ()))

    def subscribed_conversations(self, user_id: str) -> List[str]:
        return [
            conversation_id
            for conversation_id, subscribers in self._connections.items()
            if any(subscriber == user_id for subscriber, _ in subscribers)
        ]

    async def broadcast(self, conversation_id: str, payload: Dict[str, Any]) -> int:
        """Send a payload to every subscriber of a conversation; returns deliveries."""
        delivered = 0
        for user_id, websocket in list(self._connections.get(conversation_id, ())):
            try:
                await websocket.send_json(payload)
                delivered += 1
            except Exception as e:
                logger.info(f"Dropping closed connection of {user_id}: {str(e)}")
                self.disconnect(conversation_id, user_id, websocket)
        return delivered

    async def notify_user(self, user_id: str, payload: Dict[str, Any]) -> int:
        """Send a payload on every connection the user currently holds."""
        delivered = 0
        for conversation_id in self.subscribed_conversations(user_id):
            for subscriber, websocket in list(self._connections.get(conversation_id, ())):
                if subscriber != user_id:
                    continue
                try:
                    await websocket.send_json(payload)
                    delivered += 1
                except Exception as e:
                    logger.info(f"Dropping closed connection of {user_id}: {str(e)}")
                    self.disconnect(conversation_id, subscriber, websocket)
        return delivered


class RealtimeMessageHandler(EventHandler):
    """Pushes messaging events to WebSocket subscribers."""

    def __init__(self, manager: ConnectionManager):
        self.manager = manager

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, (MessageSent, MessagesRead, ConversationStarted))

    async def handle(self, event: DomainEvent) -> None:
        if isinstance(event, MessageSent):
            await self.manager.broadcast(event.conversation_id, {
                "type": "message.created",
                "data": {
                    "id": event.message_id,
                    "conversation_id": event.conversation_id,
                    "sender_id": event.sender_id,
                    "content": event.content,
                    "read": False,
                    "created_at": event.created_at
                }
            })
        elif isinstance(event, MessagesRead):
            await self.manager.broadcast(event.conversation_id, {
                "type": "messages.read",
                "data": {
                    "conversation_id": event.conversation_id,
                    "reader_id": event.reader_id,
                    "count": event.count
                }
            })
        elif isinstance(event, ConversationStarted):
            # nobody is subscribed to a brand new conversation yet
            await self.manager.notify_user(event.freelancer_id, {
                "type": "conversation.started",
                "data": {
                    "conversation_id": event.conversation_id,
                    "post_id": event.post_id,
                    "buyer_id": event.buyer_id
                }
            })


# Singleton instance
_connection_manager = None


def get_connection_manager() -> ConnectionManager:
    """Get singleton connection manager instance."""
    global _connection_manager
    if _connection_manager is None:
        _connection_manager = ConnectionManager()
    return _connection_manager
