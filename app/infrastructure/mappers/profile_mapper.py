"""
Profile mapper for converting between domain entities and database models.
"""

from app.domain.models.profile import Profile, UserRole, AccountStatus
from app.infrastructure.db.models import ProfileModel


class ProfileMapper:
    """Maps between Profile domain entity and ProfileModel database model."""
    
    def domain_to_model(self, profile: Profile) -> ProfileModel:
        """Convert Profile domain entity to ProfileModel."""
        model = ProfileModel(id=profile.id)
        self.update_model(model, profile)
        return model
    
    def update_model(self, model: ProfileModel, profile: Profile) -> None:
        """Copy entity state onto an existing row."""
        model.user_id = profile.user_id
        model.username = profile.username
        model.display_name = profile.display_name
        model.avatar_url = profile.avatar_url
        model.bio = profile.bio
        model.role = profile.role.value
        model.account_status = profile.account_status.value
        model.version = profile.version
        model.created_at = profile.created_at
        model.updated_at = profile.updated_at
    
    def model_to_domain(self, model: ProfileModel) -> Profile:
        """Convert ProfileModel to Profile domain entity."""
        return Profile(
            id=model.id,
            user_id=model.user_id,
            username=model.username,
            display_name=model.display_name,
            avatar_url=model.avatar_url,
            bio=model.bio,
            role=UserRole(model.role) if model.role else UserRole.BUYER,
            account_status=AccountStatus(model.account_status) if model.account_status else AccountStatus.ACTIVE,
            version=model.version or 1,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
