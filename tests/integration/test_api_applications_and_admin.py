"""
API tests for freelancer applications and the admin area.
"""

import pytest

from app.config import settings
from app.domain.models.profile import UserRole, AccountStatus


@pytest.fixture
def admin_headers(auth_headers, monkeypatch):
    """Bearer headers of an admin listed in the admin emails."""
    monkeypatch.setattr(settings, "admin_emails", ["boss@example.com"])
    return auth_headers("admin-1", email="boss@example.com")


class TestApplicationEndpoints:
    """Test cases for the applications router."""

    def test_questions_are_public(self, client, seed):
        seed.question("Second", position=1)
        seed.question("First", position=0)

        response = client.get("/api/v1/applications/questions")

        assert [item["question"] for item in response.json()] == ["First", "Second"]

    def test_no_application_yet(self, client, auth_headers):
        response = client.get("/api/v1/applications/me", headers=auth_headers("user-1"))

        assert response.status_code == 200
        assert response.json() is None

    def test_submit_and_withdraw(self, client, auth_headers, seed):
        """Test the account waits for approval until the application is withdrawn."""
        question = seed.question()
        headers = auth_headers("user-1", role="freelancer")

        submitted = client.post(
            "/api/v1/applications/me", headers=headers, json={"answers": {question.id: "Ten years of logos"}}
        )
        pending = client.get("/api/v1/auth/me", headers=headers)
        withdrawn = client.delete("/api/v1/applications/me", headers=headers)
        active = client.get("/api/v1/auth/me", headers=headers)

        assert submitted.status_code == 201
        assert submitted.json()["status"] == "pending"
        assert submitted.json()["answers"][0]["answer"] == "Ten years of logos"
        assert pending.json()["account_status"] == "pending_approval"
        assert withdrawn.status_code == 200
        assert active.json()["account_status"] == "active"

    def test_missing_required_answer(self, client, auth_headers, seed):
        seed.question()

        response = client.post("/api/v1/applications/me", headers=auth_headers("user-1"), json={"answers": {}})

        assert response.status_code == 400

    def test_pending_application_cannot_be_resubmitted(self, client, auth_headers, seed):
        question = seed.question()
        headers = auth_headers("user-1")
        body = {"answers": {question.id: "Logos"}}
        client.post("/api/v1/applications/me", headers=headers, json=body)

        response = client.post("/api/v1/applications/me", headers=headers, json=body)

        assert response.status_code == 409


class TestAdminEndpoints:
    """Test cases for the admin router."""

    def test_requires_admin(self, client, auth_headers):
        """Test regular users are forbidden."""
        response = client.get("/api/v1/admin/users", headers=auth_headers("user-1"))

        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"

    def test_review_application(self, client, auth_headers, admin_headers, seed):
        """Test approving an application turns the applicant into a freelancer."""
        question = seed.question()
        applicant = auth_headers("user-1")
        application = client.post(
            "/api/v1/applications/me", headers=applicant, json={"answers": {question.id: "Logos"}}
        ).json()

        queue = client.get("/api/v1/admin/applications?status=pending", headers=admin_headers)
        reviewed = client.post(
            f"/api/v1/admin/applications/{application['id']}/review",
            headers=admin_headers,
            json={"decision": "approved"}
        )
        profile = client.get("/api/v1/auth/me", headers=applicant)

        assert [item["id"] for item in queue.json()] == [application["id"]]
        assert reviewed.status_code == 200
        assert reviewed.json()["status"] == "approved"
        assert reviewed.json()["reviewed_by"] == "admin-1"
        assert profile.json()["role"] == "freelancer"
        assert profile.json()["account_status"] == "active"

    def test_invalid_decision(self, client, admin_headers):
        response = client.post(
            "/api/v1/admin/applications/app-1/review", headers=admin_headers, json={"decision": "maybe"}
        )

        assert response.status_code == 422

    def test_manage_questions(self, client, admin_headers):
        """Test questions are appended, edited and deleted."""
        first = client.post(
            "/api/v1/admin/questions", headers=admin_headers, json={"question": "Portfolio link?", "type": "text"}
        )
        second = client.post("/api/v1/admin/questions", headers=admin_headers, json={"question": "Experience?"})
        edited = client.patch(
            f"/api/v1/admin/questions/{first.json()['id']}", headers=admin_headers, json={"required": False}
        )
        deleted = client.delete(f"/api/v1/admin/questions/{second.json()['id']}", headers=admin_headers)
        listed = client.get("/api/v1/admin/questions", headers=admin_headers)

        assert first.status_code == 201
        assert first.json()["order_position"] == 0
        assert second.json()["order_position"] == 1
        assert edited.json()["required"] is False
        assert deleted.status_code == 200
        assert [item["question"] for item in listed.json()] == ["Portfolio link?"]

    def test_suspend_user(self, client, auth_headers, admin_headers, seed):
        """Test suspended users can no longer act."""
        seed.profile("buyer-1")
        post = seed.post("seller-1")

        suspended = client.put(
            "/api/v1/admin/users/buyer-1/status", headers=admin_headers, json={"status": "suspended"}
        )
        review = client.put(
            f"/api/v1/reviews/posts/{post.id}", headers=auth_headers("buyer-1"), json={"rating": 5}
        )

        assert suspended.status_code == 200
        assert suspended.json()["account_status"] == "suspended"
        assert review.status_code == 409

    def test_admins_cannot_be_suspended(self, client, admin_headers, seed):
        seed.profile("admin-2", UserRole.ADMIN)

        response = client.put(
            "/api/v1/admin/users/admin-2/status", headers=admin_headers, json={"status": "suspended"}
        )

        assert response.status_code == 409

    def test_list_users(self, client, admin_headers, auth_service, seed, monkeypatch):
        """Test profiles are listed with their auth emails."""
        seed.profile("buyer-1")
        seed.profile("seller-1", UserRole.FREELANCER, AccountStatus.ACTIVE)
        monkeypatch.setattr(settings, "supabase_url", "https://project.supabase.co")
        monkeypatch.setattr(settings, "supabase_service_key", "service-key")
        auth_service.list_user_emails.return_value = {"seller-1": "seller@example.com"}

        response = client.get("/api/v1/admin/users?role=freelancer", headers=admin_headers)

        assert response.status_code == 200
        assert [(item["user_id"], item["email"]) for item in response.json()] == [("seller-1", "seller@example.com")]

    def test_check_database(self, client, admin_headers):
        response = client.get("/api/v1/admin/database", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["healthy"] is True
        assert response.json()["missing"] == []
