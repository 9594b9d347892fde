"""
Unit tests for Profile domain model.
"""

import pytest
from app.domain.events.marketplace_events import AccountStatusChanged
from app.domain.models.base import ValidationError, BusinessRuleViolation
from app.domain.models.profile import Profile, UserRole, AccountStatus


class TestProfile:
    """Test cases for Profile domain model."""

    def test_create_profile_defaults(self):
        """Test a new profile is an active buyer."""
        profile = Profile.create("user-1")

        assert profile.id is not None
        assert profile.user_id == "user-1"
        assert profile.role == UserRole.BUYER
        assert profile.account_status == AccountStatus.ACTIVE
        assert profile.is_buyer
        assert not profile.is_admin

    def test_create_freelancer_profile(self):
        """Test creating a profile with the freelancer role."""
        profile = Profile.create("user-1", UserRole.FREELANCER, username="jane_doe", display_name="Jane")

        assert profile.is_freelancer
        assert profile.username == "jane_doe"
        assert profile.display_name == "Jane"

    def test_admin_role_cannot_be_self_assigned(self):
        """Test the admin role is never given at creation."""
        with pytest.raises(BusinessRuleViolation):
            Profile.create("user-1", UserRole.ADMIN)

    def test_roles_and_statuses_parse_from_strings(self):
        """Test values loaded from storage become enums."""
        profile = Profile(user_id="user-1", role="freelancer", account_status="suspended")

        assert profile.role == UserRole.FREELANCER
        assert profile.account_status == AccountStatus.SUSPENDED
        assert profile.is_suspended

    @pytest.mark.parametrize("username", ["ab", "has space", "dash-name", "x" * 31])
    def test_invalid_username(self, username):
        """Test usernames outside the allowed pattern are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            Profile.create("user-1", username=username)
        assert exc_info.value.field == "username"

    def test_bio_length_limit(self):
        """Test the bio is limited to 160 characters."""
        profile = Profile.create("user-1")

        with pytest.raises(ValidationError):
            profile.update_details(bio="x" * 161)

    def test_public_name_fallbacks(self):
        """Test the public name prefers display name, then username."""
        profile = Profile.create("user-1")
        assert profile.public_name == "Anonymous"

        profile.update_details(username="jane_doe")
        assert profile.public_name == "jane_doe"

        profile.update_details(display_name="Jane Doe")
        assert profile.public_name == "Jane Doe"

    def test_update_details_clears_with_empty_string(self):
        """Test empty strings clear optional fields while None keeps them."""
        profile = Profile.create("user-1", display_name="Jane", username="jane_doe")
        profile.update_details(bio="Logo designer")

        profile.update_details(display_name="", bio=None)

        assert profile.display_name is None
        assert profile.bio == "Logo designer"
        assert profile.username == "jane_doe"

    def test_update_details_increments_version(self):
        """Test edits bump the aggregate version."""
        profile = Profile.create("user-1")
        version = profile.version

        profile.update_details(bio="Hello")

        assert profile.version == version + 1

    def test_change_status_emits_event(self):
        """Test status changes return the previous status and raise an event."""
        profile = Profile.create("user-1")

        previous = profile.change_status(AccountStatus.SUSPENDED, changed_by="admin-1")

        assert previous == AccountStatus.ACTIVE
        assert profile.is_suspended
        events = profile.pull_events()
        assert len(events) == 1
        assert isinstance(events[0], AccountStatusChanged)
        assert events[0].previous_status == "active"
        assert events[0].new_status == "suspended"
        assert events[0].changed_by == "admin-1"

    def test_change_to_same_status_is_silent(self):
        """Test setting the current status changes nothing."""
        profile = Profile.create("user-1")

        profile.change_status(AccountStatus.ACTIVE)

        assert profile.pull_events() == []

    def test_promote_to(self):
        """Test assigning a new role."""
        profile = Profile.create("user-1")

        profile.promote_to(UserRole.ADMIN)

        assert profile.is_admin

    def test_suspended_account_cannot_act(self):
        """Test suspended accounts are blocked from acting."""
        profile = Profile.create("user-1")
        profile.ensure_can_act()

        profile.change_status(AccountStatus.SUSPENDED)

        with pytest.raises(BusinessRuleViolation, match="suspended"):
            profile.ensure_can_act()
