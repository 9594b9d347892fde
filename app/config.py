"""
Application configuration using Pydantic Settings.
Loads environment variables and provides type-safe configuration.
"""

from typing import List, Optional
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, validator
from pathlib import Path

# Get the base directory
BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_CATEGORIES = [
    "Design", "Development", "Writing", "Video", "Animation", "Music", "Marketing"
]


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Environment
    environment: str = Field(default="development", description="Current environment")
    debug: bool = Field(default=False, description="Debug mode")
    
    # API Configuration
    api_title: str = Field(default="Freelance Marketplace API")
    api_version: str = Field(default="1.0.0")
    api_prefix: str = Field(default="/api/v1")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    
    # Supabase Configuration
    supabase_url: str = Field(default="https://example.supabase.co", description="Supabase project URL")
    supabase_anon_key: str = Field(default="", description="Supabase anonymous key")
    supabase_service_key: str = Field(default="", description="Supabase service role key")
    supabase_jwt_secret: str = Field(
        default="development-secret-key-change-in-production",
        description="Secret used by Supabase to sign access tokens"
    )
    
    # Database
    database_url: str = Field(
        default=f"sqlite:///{BASE_DIR / 'marketplace.db'}",
        description="SQLAlchemy database URL (the Supabase Postgres in production)"
    )
    
    # CORS
    cors_origins: str | List[str] = Field(
        default="http://localhost:3000,http://localhost:5173,http://localhost:8080"
    )
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(default=["*"])
    cors_allow_headers: List[str] = Field(default=["*"])
    
    # Pagination
    default_page_size: int = Field(default=20)
    max_page_size: int = Field(default=100)
    
    # File Upload
    max_upload_size_mb: int = Field(default=5)
    allowed_upload_extensions: str | List[str] = Field(
        default=".png,.jpg,.jpeg,.gif,.webp"
    )
    storage_bucket: str = Field(default="public", description="Bucket for avatars and post images")
    
    # Rate Limiting
    rate_limit_enabled: bool = Field(default=True)
    redis_url: Optional[str] = Field(default=None, description="Redis URL for shared rate limits")
    
    # Sentry (Optional)
    sentry_dsn: Optional[str] = Field(default=None)
    sentry_traces_sample_rate: float = Field(default=0.1)
    
    # Email Configuration
    smtp_host: Optional[str] = Field(default=None)
    smtp_port: int = Field(default=587)
    smtp_user: Optional[str] = Field(default=None)
    smtp_password: Optional[str] = Field(default=None)
    email_from_name: str = Field(default="Freelance Marketplace")
    email_from_address: str = Field(default="noreply@example.com")
    frontend_url: str = Field(default="http://localhost:8080")
    
    # Marketplace
    admin_emails: str | List[str] = Field(default="", description="Emails always treated as admins")
    marketplace_categories: str | List[str] = Field(default=",".join(DEFAULT_CATEGORIES))
    
    @validator("cors_origins", pre=True, always=True)
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            if not v or v.strip() == "":
                return ["http://localhost:3000", "http://localhost:5173", "http://localhost:8080"]
            return _split_csv(v)
        elif v is None:
            return ["http://localhost:3000", "http://localhost:5173", "http://localhost:8080"]
        return v
    
    @validator("allowed_upload_extensions", pre=True, always=True)
    def parse_upload_extensions(cls, v):
        """Parse upload extensions from comma-separated string or list."""
        if isinstance(v, str):
            if not v or v.strip() == "":
                return [".png", ".jpg", ".jpeg", ".gif", ".webp"]
            return [ext.lower() for ext in _split_csv(v)]
        elif v is None:
            return [".png", ".jpg", ".jpeg", ".gif", ".webp"]
        return v
    
    @validator("admin_emails", pre=True, always=True)
    def parse_admin_emails(cls, v):
        """Parse admin emails, normalized to lower case."""
        if v is None:
            return []
        if isinstance(v, str):
            return [email.lower() for email in _split_csv(v)]
        return [email.lower() for email in v]
    
    @validator("marketplace_categories", pre=True, always=True)
    def parse_categories(cls, v):
        """Parse marketplace categories from comma-separated string or list."""
        if isinstance(v, str):
            return _split_csv(v) or list(DEFAULT_CATEGORIES)
        elif v is None:
            return list(DEFAULT_CATEGORIES)
        return v
    
    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"
    
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"
    
    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment.lower() == "testing"
    
    @property
    def max_upload_size_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_size_mb * 1024 * 1024
    
    @property
    def has_service_role(self) -> bool:
        """Whether admin operations against Supabase Auth are possible."""
        return bool(self.supabase_url and self.supabase_service_key)
    
    def is_admin_email(self, email: Optional[str]) -> bool:
        """Check whether an email is configured as an admin email."""
        return bool(email) and email.lower() in self.admin_emails
    
    def validate_environment(self) -> None:
        """Validate that all required environment variables are set."""
        required_vars = [
            "supabase_url",
            "supabase_anon_key",
            "supabase_service_key",
            "supabase_jwt_secret",
            "database_url"
        ]
        
        missing_vars = []
        for var in required_vars:
            if not getattr(self, var, None):
                missing_vars.append(var.upper())
        
        if missing_vars:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing_vars)}"
            )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use this function to get settings throughout the application.
    """
    settings = Settings()
    
    # Validate environment in production
    if settings.is_production:
        settings.validate_environment()
    
    return settings


# Create a global settings instance
settings = get_settings()
