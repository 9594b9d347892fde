"""
Supabase authentication service.
Handles user authentication operations with Supabase.
"""

import logging
from typing import Optional, Dict, Any, List

from supabase import Client

from app.infrastructure.auth.supabase_client import get_supabase_client, get_supabase_admin_client
from app.domain.models.base import ValidationError, BusinessRuleViolation
from app.domain.models.profile import UserRole


logger = logging.getLogger(__name__)

SIGNUP_ROLES = (UserRole.BUYER.value, UserRole.FREELANCER.value)


class SupabaseAuthService:
    """Service for Supabase authentication operations."""
    
    def __init__(self, client: Optional[Client] = None, admin_client: Optional[Client] = None):
        self._client = client
        self._admin_client = admin_client
    
    @property
    def supabase(self) -> Client:
        if self._client is None:
            self._client = get_supabase_client()
        return self._client
    
    @property
    def admin(self) -> Client:
        if self._admin_client is None:
            self._admin_client = get_supabase_admin_client()
        return self._admin_client
    
    def sign_up(
        self,
        email: str,
        password: str,
        role: str = UserRole.BUYER.value,
        metadata: Optional[Dict] = None
    ) -> Dict[str, Any]:
        """
        Sign up a new user.
        
        Args:
            email: User email
            password: User password
            role: Marketplace role, buyer or freelancer
            metadata: Optional extra user metadata
            
        Returns:
            Dict containing user data and session
            
        Raises:
            ValidationError: If sign up fails
        """
        if role not in SIGNUP_ROLES:
            raise ValidationError("Role must be buyer or freelancer", "role")
        
        try:
            response = self.supabase.auth.sign_up({
                "email": email,
                "password": password,
                "options": {
                    "data": {**(metadata or {}), "role": role}
                }
            })
        except Exception as e:
            raise ValidationError(f"Sign up failed: {str(e)}")
        
        if response.user is None:
            raise ValidationError("Failed to create user account")
        
        return {
            "user": response.user.model_dump(mode="json"),
            "session": response.session.model_dump(mode="json") if response.session else None
        }
    
    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """
        Sign in a user.
        
        Raises:
            ValidationError: If sign in fails
        """
        try:
            response = self.supabase.auth.sign_in_with_password({
                "email": email,
                "password": password
            })
        except Exception as e:
            raise ValidationError(f"Sign in failed: {str(e)}")
        
        if response.user is None or response.session is None:
            raise ValidationError("Invalid email or password")
        
        return {
            "user": response.user.model_dump(mode="json"),
            "access_token": response.session.access_token,
            "refresh_token": response.session.refresh_token
        }
    
    def refresh_token(self, refresh_token: str) -> Dict[str, Any]:
        """
        Refresh access token.
        
        Raises:
            ValidationError: If refresh fails
        """
        try:
            response = self.supabase.auth.refresh_session(refresh_token)
        except Exception as e:
            raise ValidationError(f"Token refresh failed: {str(e)}")
        
        if response.session is None:
            raise ValidationError("Invalid refresh token")
        
        return {
            "access_token": response.session.access_token,
            "refresh_token": response.session.refresh_token
        }
    
    def sign_out(self, access_token: str) -> bool:
        """Revoke the session of an access token. Expired tokens count as signed out."""
        try:
            self.admin.auth.admin.sign_out(access_token)
        except Exception as e:
            logger.info(f"Sign out could not revoke the session: {str(e)}")
        return True
    
    def reset_password(self, email: str, redirect_to: Optional[str] = None) -> bool:
        """Send password reset email. Never reveals whether the email exists."""
        try:
            options = {"redirect_to": redirect_to} if redirect_to else {}
            self.supabase.auth.reset_password_email(email, options)
        except Exception as e:
            logger.info(f"Password reset request failed: {str(e)}")
        return True
    
    def update_password(self, user_id: str, new_password: str) -> bool:
        """
        Update a user's password.
        
        Raises:
            ValidationError: If update fails
        """
        try:
            response = self.admin.auth.admin.update_user_by_id(user_id, {"password": new_password})
        except BusinessRuleViolation:
            raise
        except Exception as e:
            raise ValidationError(f"Password update failed: {str(e)}")
        return response.user is not None
    
    def delete_user(self, user_id: str) -> None:
        """
        Delete an auth user. Requires the service role key.
        
        Raises:
            BusinessRuleViolation: If the service key is missing
            ValidationError: If Supabase refuses the deletion
        """
        try:
            self.admin.auth.admin.delete_user(user_id)
        except BusinessRuleViolation:
            raise
        except Exception as e:
            raise ValidationError(f"Account deletion failed: {str(e)}")
        logger.info(f"Deleted auth user {user_id}")
    
    def list_user_emails(self, per_page: int = 1000) -> Dict[str, str]:
        """Map of auth user ID to email, read page by page with the service role key."""
        emails: Dict[str, str] = {}
        page = 1
        while True:
            users: List[Any] = self.admin.auth.admin.list_users(page=page, per_page=per_page)
            for user in users:
                if user.email:
                    emails[str(user.id)] = user.email
            if len(users) < per_page:
                return emails
            page += 1
    
    def get_user_email(self, user_id: str) -> Optional[str]:
        """Email of an auth user, read with the service role key."""
        response = self.admin.auth.admin.get_user_by_id(user_id)
        return response.user.email if response and response.user else None
