"""
API tests for buyer-freelancer conversations.
"""

import pytest
from starlette.websockets import WebSocketDisconnect


@pytest.fixture
def post(seed):
    return seed.post("seller-1")


@pytest.fixture
def buyer(auth_headers):
    return auth_headers("buyer-1")


@pytest.fixture
def seller(auth_headers):
    return auth_headers("seller-1", role="freelancer")


class TestConversationEndpoints:
    """Test cases for the messaging router."""

    def test_start_and_reply(self, client, post, buyer, seller):
        """Test a buyer writes first and the freelancer answers."""
        started = client.post("/api/v1/messaging/conversations/start", headers=buyer, json={
            "post_id": post.id, "freelancer_id": "seller-1", "content": "Hi, are you available?"
        })
        conversation_id = started.json()["conversation"]["id"]

        inbox = client.get("/api/v1/messaging/conversations?role=freelancer", headers=seller)
        reply = client.post(
            f"/api/v1/messaging/conversations/{conversation_id}/messages",
            headers=seller,
            json={"content": "Yes!"}
        )

        assert started.status_code == 201
        assert started.json()["created"] is True
        assert started.json()["message"]["content"] == "Hi, are you available?"
        assert inbox.json()[0]["unread_count"] == 1
        assert inbox.json()[0]["post_title"] == post.title
        assert reply.status_code == 201
        assert reply.json()["sender_id"] == "seller-1"

    def test_events_published_after_request(self, client, post, buyer, event_dispatcher):
        """Test the request's events are dispatched once it has committed, oldest first."""
        client.post("/api/v1/messaging/conversations/start", headers=buyer, json={
            "post_id": post.id, "freelancer_id": "seller-1", "content": "Hi"
        })

        log = event_dispatcher.get_event_log()

        assert [entry["event_type"] for entry in reversed(log)] == ["ConversationStarted", "MessageSent"]

    def test_failed_request_publishes_nothing(self, client, post, seller, event_dispatcher):
        client.post("/api/v1/messaging/conversations", headers=seller, json={
            "post_id": post.id, "freelancer_id": "seller-1"
        })

        assert event_dispatcher.get_event_log() == []

    def test_open_reuses_conversation(self, client, post, buyer):
        """Test the same pair and post share one conversation."""
        body = {"post_id": post.id, "freelancer_id": "seller-1"}

        first = client.post("/api/v1/messaging/conversations", headers=buyer, json=body)
        second = client.post("/api/v1/messaging/conversations", headers=buyer, json=body)

        assert first.json()["created"] is True
        assert second.json()["created"] is False
        assert second.json()["conversation"]["id"] == first.json()["conversation"]["id"]

    def test_reading_marks_messages(self, client, post, buyer, seller):
        """Test opening the thread marks the counterpart's messages read."""
        conversation_id = client.post("/api/v1/messaging/conversations/start", headers=buyer, json={
            "post_id": post.id, "freelancer_id": "seller-1", "content": "Hello"
        }).json()["conversation"]["id"]

        thread = client.get(f"/api/v1/messaging/conversations/{conversation_id}/messages", headers=seller)
        again = client.post(f"/api/v1/messaging/conversations/{conversation_id}/read", headers=seller)

        assert thread.status_code == 200
        assert thread.json()["marked_read"] == 1
        assert [message["content"] for message in thread.json()["messages"]] == ["Hello"]
        assert again.json() == {"conversation_id": conversation_id, "marked_read": 0}

    def test_outsiders_are_forbidden(self, client, post, buyer, auth_headers):
        conversation_id = client.post("/api/v1/messaging/conversations", headers=buyer, json={
            "post_id": post.id, "freelancer_id": "seller-1"
        }).json()["conversation"]["id"]

        response = client.get(
            f"/api/v1/messaging/conversations/{conversation_id}/messages", headers=auth_headers("buyer-2")
        )

        assert response.status_code == 403

    def test_cannot_message_yourself(self, client, post, seller):
        response = client.post("/api/v1/messaging/conversations", headers=seller, json={
            "post_id": post.id, "freelancer_id": "seller-1"
        })

        assert response.status_code == 409

    def test_empty_message(self, client, post, buyer):
        response = client.post("/api/v1/messaging/conversations/start", headers=buyer, json={
            "post_id": post.id, "freelancer_id": "seller-1", "content": ""
        })

        assert response.status_code == 422


class TestConversationFeed:
    """Test cases for the conversation WebSocket."""

    def test_rejects_invalid_token(self, client):
        with pytest.raises(WebSocketDisconnect) as disconnect:
            with client.websocket_connect("/api/v1/messaging/ws/conv-1?token=broken"):
                pass

        assert disconnect.value.code == 4401

    def test_rejects_non_participants(self, client, post, buyer, jwt_handler):
        conversation_id = client.post("/api/v1/messaging/conversations", headers=buyer, json={
            "post_id": post.id, "freelancer_id": "seller-1"
        }).json()["conversation"]["id"]
        token = jwt_handler.generate_test_token("buyer-2")

        with pytest.raises(WebSocketDisconnect) as disconnect:
            with client.websocket_connect(f"/api/v1/messaging/ws/{conversation_id}?token={token}"):
                pass

        assert disconnect.value.code == 4403
