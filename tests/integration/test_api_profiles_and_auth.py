"""
API tests for identity, profiles and account endpoints.
"""

from app.config import settings
from app.domain.models.profile import UserRole


class TestServiceEndpoints:
    """Test cases for root and health endpoints."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["health"] == "/api/v1/health"

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_unknown_path(self, client):
        response = client.get("/api/v1/nothing-here")

        assert response.status_code == 404
        assert response.json()["path"] == "/api/v1/nothing-here"


class TestAuthEndpoints:
    """Test cases for the auth router."""

    def test_me_requires_token(self, client):
        """Test requests without bearer token are rejected."""
        response = client.get("/api/v1/auth/me")

        assert response.status_code in (401, 403)

    def test_invalid_token(self, client):
        """Test garbage tokens are unauthorized."""
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_me_creates_profile_from_signup_role(self, client, auth_headers):
        """Test first access creates the profile with the signup role."""
        response = client.get("/api/v1/auth/me", headers=auth_headers("user-1", role="freelancer"))

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "freelancer"
        assert data["account_status"] == "active"
        assert data["is_admin"] is False

    def test_admin_by_email(self, client, auth_headers, monkeypatch):
        """Test configured admin emails are admins without the admin role."""
        monkeypatch.setattr(settings, "admin_emails", ["boss@example.com"])

        response = client.get("/api/v1/auth/me", headers=auth_headers("user-1", email="Boss@Example.com"))

        assert response.json()["is_admin"] is True

    def test_logout(self, client, auth_headers, auth_service):
        """Test the session of the token is revoked."""
        headers = auth_headers("user-1")

        response = client.post("/api/v1/auth/logout", headers=headers)

        assert response.status_code == 200
        auth_service.sign_out.assert_called_once_with(headers["Authorization"][7:])

    def test_reset_password_never_reveals_accounts(self, client, auth_service):
        """Test the answer is the same whether or not the email exists."""
        response = client.post("/api/v1/auth/reset-password", json={"email": "jane@example.com"})

        assert response.status_code == 200
        assert "reset link" in response.json()["message"]
        auth_service.reset_password.assert_called_once_with("jane@example.com", None)

    def test_register_passes_role(self, client, auth_service):
        """Test the chosen role is sent to Supabase."""
        auth_service.sign_up.return_value = {
            "user": {"id": "user-1", "email": "jane@example.com"},
            "session": {"access_token": "access", "refresh_token": "refresh"}
        }

        response = client.post("/api/v1/auth/register", json={
            "email": "jane@example.com",
            "password": "long-enough",
            "role": "freelancer",
            "username": "jane_doe"
        })

        assert response.status_code == 201
        assert response.json()["access_token"] == "access"
        kwargs = auth_service.sign_up.call_args.kwargs
        assert kwargs["role"] == "freelancer"
        assert kwargs["metadata"] == {"username": "jane_doe"}

    def test_register_rejects_admin_role(self, client):
        """Test nobody signs up as admin."""
        response = client.post("/api/v1/auth/register", json={
            "email": "jane@example.com", "password": "long-enough", "role": "admin"
        })

        assert response.status_code == 422

    def test_delete_account(self, client, auth_headers, auth_service, seed):
        """Test deleting the account removes the auth user and takes the posts off the marketplace."""
        headers = auth_headers("user-1", role="freelancer")
        client.get("/api/v1/profiles/me", headers=headers)
        seed.post("user-1")

        response = client.delete("/api/v1/auth/account", headers=headers)
        marketplace = client.get("/api/v1/marketplace/posts")

        assert response.status_code == 200
        auth_service.delete_user.assert_called_once_with("user-1")
        assert marketplace.json()["items"] == []


class TestProfileEndpoints:
    """Test cases for the profiles router."""

    def test_get_and_update_my_profile(self, client, auth_headers):
        """Test editing the caller's profile."""
        headers = auth_headers("user-1", display_name="Jane")

        created = client.get("/api/v1/profiles/me", headers=headers)
        updated = client.patch("/api/v1/profiles/me", headers=headers, json={
            "username": "jane_doe", "bio": "Logo designer"
        })

        assert created.json()["display_name"] == "Jane"
        assert updated.status_code == 200
        assert updated.json()["username"] == "jane_doe"
        assert updated.json()["bio"] == "Logo designer"

    def test_update_rejects_unknown_fields(self, client, auth_headers):
        """Test role and status cannot be edited through the profile."""
        response = client.patch("/api/v1/profiles/me", headers=auth_headers("user-1"), json={"role": "admin"})

        assert response.status_code == 422

    def test_duplicate_username(self, client, auth_headers, seed):
        """Test taken usernames conflict."""
        seed.profile("user-0", username="jane_doe")

        response = client.patch("/api/v1/profiles/me", headers=auth_headers("user-1"), json={"username": "jane_doe"})

        assert response.status_code == 409

    def test_upload_avatar(self, client, auth_headers, storage):
        """Test avatars go to storage and the URL is saved."""
        response = client.post(
            "/api/v1/profiles/me/avatar",
            headers=auth_headers("user-1"),
            files={"file": ("me.png", b"\x89PNG", "image/png")}
        )

        assert response.status_code == 200
        assert response.json()["avatar_url"] == "https://cdn.example.com/avatars/me.png"
        assert storage.upload_image.await_args.kwargs["folder"] == "avatars"

    def test_public_profile(self, client, seed):
        """Test public pages need no authentication."""
        seed.profile("seller-1", UserRole.FREELANCER, display_name="Jane Doe")
        seed.post("seller-1")

        response = client.get("/api/v1/profiles/seller-1")

        assert response.status_code == 200
        assert response.json()["profile"]["display_name"] == "Jane Doe"
        assert len(response.json()["posts"]) == 1

    def test_unknown_public_profile(self, client):
        response = client.get("/api/v1/profiles/ghost")

        assert response.status_code == 404
