"""
JWT token handler for Supabase authentication.
Validates JWT tokens and extracts user information.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timedelta
from jose import JWTError, jwt as jose_jwt

from app.config import get_settings
from app.domain.models.base import ValidationError


class JWTHandler:
    """Handles JWT token validation and user extraction."""
    
    def __init__(self):
        self.settings = get_settings()
        self.jwt_secret = self.settings.supabase_jwt_secret
        self.jwt_algorithm = "HS256"
    
    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a Supabase JWT token.
        
        Args:
            token: JWT token string
            
        Returns:
            Dict containing token payload
            
        Raises:
            ValidationError: If token is invalid or expired
        """
        if token.startswith('Bearer '):
            token = token[7:]
        
        try:
            payload = jose_jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"verify_exp": True, "verify_aud": False}
            )
        except JWTError as e:
            raise ValidationError(f"Invalid JWT token: {str(e)}")
        
        # Validate required claims
        if not payload.get('sub'):
            raise ValidationError("Token missing user ID (sub claim)")
        
        if 'exp' not in payload:
            raise ValidationError("Token missing expiration (exp claim)")
        
        return payload
    
    def get_user_id(self, token: str) -> str:
        """
        Extract user ID from JWT token.
        
        Raises:
            ValidationError: If token is invalid
        """
        payload = self.verify_token(token)
        return payload['sub']
    
    def get_user_email(self, token: str) -> Optional[str]:
        """Extract user email from JWT token, None when absent or invalid."""
        try:
            payload = self.verify_token(token)
            return payload.get('email')
        except ValidationError:
            return None
    
    def get_signup_role(self, payload: Dict[str, Any]) -> Optional[str]:
        """
        Marketplace role chosen at signup.
        Supabase keeps it in user_metadata; the top-level 'role' claim is the
        database role ('authenticated') and is not a marketplace role.
        """
        metadata = payload.get('user_metadata') or {}
        return metadata.get('role')
    
    def is_token_valid(self, token: str) -> bool:
        """Check if token is valid without raising exceptions."""
        try:
            self.verify_token(token)
            return True
        except ValidationError:
            return False
    
    def generate_test_token(
        self,
        user_id: str,
        email: str = "test@example.com",
        role: str = "buyer",
        expires_minutes: int = 60,
        metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Generate a Supabase-shaped JWT for development and tests.
        
        Args:
            user_id: User ID to include in token
            email: User email
            role: Marketplace role stored in user_metadata
            expires_minutes: Token expiration in minutes
            metadata: Extra user metadata
            
        Returns:
            JWT token string
        """
        now = datetime.utcnow()
        expire = now + timedelta(minutes=expires_minutes)
        
        payload = {
            "sub": user_id,
            "email": email,
            "role": "authenticated",
            "user_metadata": {"role": role, **(metadata or {})},
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
            "aud": "authenticated",
            "iss": "supabase"
        }
        
        return jose_jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)
