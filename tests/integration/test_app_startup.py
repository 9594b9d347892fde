"""
Tests for application startup and the event handlers it registers.
"""

from app.config import settings


class TestStartup:
    """Test cases for the application lifespan."""

    def test_registers_event_handlers(self, client, event_dispatcher, monkeypatch):
        """Test startup wires the realtime, email and logging handlers."""
        monkeypatch.setattr(settings, "smtp_host", None)

        with client:
            registered = event_dispatcher.get_registered_handlers()

        assert registered["MessageSent"] == ["RealtimeMessageHandler"]
        assert registered["MessagesRead"] == ["RealtimeMessageHandler"]
        assert registered["ConversationStarted"] == ["RealtimeMessageHandler"]
        assert registered["ApplicationReviewed"] == ["EmailNotificationHandler"]
        assert registered["AccountStatusChanged"] == ["EmailNotificationHandler"]
        assert registered["global"] == ["LoggingEventHandler"]

    def test_sent_messages_reach_subscribers(self, client, seed, auth_headers, jwt_handler, monkeypatch):
        """Test a running app streams message.created to the conversation feed."""
        monkeypatch.setattr(settings, "smtp_host", None)
        post = seed.post("seller-1")

        with client:
            conversation_id = client.post("/api/v1/messaging/conversations", headers=auth_headers("buyer-1"), json={
                "post_id": post.id, "freelancer_id": "seller-1"
            }).json()["conversation"]["id"]
            token = jwt_handler.generate_test_token("buyer-1")

            with client.websocket_connect(f"/api/v1/messaging/ws/{conversation_id}?token={token}") as feed:
                client.post(
                    f"/api/v1/messaging/conversations/{conversation_id}/messages",
                    headers=auth_headers("seller-1", role="freelancer"),
                    json={"content": "Thanks for reaching out!"}
                )
                event = feed.receive_json()

        assert event["type"] == "message.created"
        assert event["data"]["content"] == "Thanks for reaching out!"
        assert event["data"]["sender_id"] == "seller-1"
