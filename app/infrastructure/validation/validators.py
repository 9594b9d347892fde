"""
Input validation utilities.
Security-focused validators used by the request DTOs.
"""

import re
import html
import os
import urllib.parse
from typing import List, Optional
import bleach

from app.config import settings

# Security configurations
ALLOWED_HTML_TAGS: List[str] = []
ALLOWED_HTML_ATTRIBUTES = {}

# Regex patterns for common validation
PATTERNS = {
    'xss_basic': re.compile(r'<[^>]*script[^>]*>|javascript:|vbscript:|onload\s*=|onerror\s*=|eval\(', re.IGNORECASE),
    'path_traversal': re.compile(r'\.\./|\.\.\\', re.IGNORECASE),
    'email': re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'),
    'url': re.compile(r'^https?://[^\s/$.?#].[^\s]*$', re.IGNORECASE),
    'username': re.compile(r'^[a-zA-Z0-9_]{3,30}$'),
    'safe_filename': re.compile(r'^[a-zA-Z0-9\-_.()]+\.[a-zA-Z0-9]{2,10}$')
}


class SecurityValidator:
    """Security-focused validators to prevent injection attacks."""
    
    @staticmethod
    def check_xss(value: str) -> str:
        """Check for potential XSS patterns."""
        if not isinstance(value, str):
            return value
            
        if PATTERNS['xss_basic'].search(value):
            raise ValueError("Potentially unsafe script content detected")
        return value
    
    @staticmethod
    def check_path_traversal(value: str) -> str:
        """Check for path traversal attempts."""
        if not isinstance(value, str):
            return value
            
        if PATTERNS['path_traversal'].search(value):
            raise ValueError("Path traversal attempt detected")
        return value
    
    @staticmethod
    def sanitize_html(value: str, allowed_tags: Optional[List[str]] = None) -> str:
        """Remove HTML tags and attributes, keeping the text."""
        if not isinstance(value, str):
            return value
            
        if allowed_tags is None:
            allowed_tags = ALLOWED_HTML_TAGS
            
        sanitized = bleach.clean(
            value,
            tags=allowed_tags,
            attributes=ALLOWED_HTML_ATTRIBUTES,
            strip=True
        )
        
        # bleach escapes bare "<", ">" and "&" in the remaining text
        return html.unescape(sanitized)
    
    @staticmethod
    def sanitize_markdown(value: str) -> str:
        """Strip embedded HTML from markdown text and reject script content."""
        if not isinstance(value, str):
            return value
        
        cleaned = SecurityValidator.sanitize_html(value)
        return SecurityValidator.check_xss(cleaned)
    
    @staticmethod
    def sanitize_filename(value: str) -> str:
        """Sanitize filename to prevent path traversal and other attacks."""
        if not isinstance(value, str):
            return value
        
        value = os.path.basename(value.replace('\\', '/'))
        
        # Remove dangerous characters
        value = re.sub(r'[<>:"|?*\s]', '_', value)
        
        # Ensure it matches safe filename pattern
        if not PATTERNS['safe_filename'].match(value):
            raise ValueError("Invalid filename format")
            
        return value


class DataValidator:
    """Validators for common data formats."""
    
    @staticmethod
    def validate_email(email: str) -> str:
        """Validate email format with additional security checks."""
        if not isinstance(email, str):
            raise ValueError("Email must be a string")
            
        email = email.strip().lower()
        
        if not PATTERNS['email'].match(email):
            raise ValueError("Invalid email format")
            
        return email
    
    @staticmethod
    def validate_url(url: str) -> str:
        """Validate URL format with security checks."""
        if not isinstance(url, str):
            raise ValueError("URL must be a string")
            
        url = url.strip()
        
        if not PATTERNS['url'].match(url):
            raise ValueError("Invalid URL format")
            
        parsed = urllib.parse.urlparse(url)
        if parsed.scheme not in ['http', 'https']:
            raise ValueError("URL must use HTTP or HTTPS protocol")
            
        return url
    
    @staticmethod
    def validate_username(username: str) -> str:
        """Usernames are 3-30 letters, digits or underscores."""
        if not isinstance(username, str):
            raise ValueError("Username must be a string")
        
        username = username.strip()
        if not PATTERNS['username'].match(username):
            raise ValueError("Username must be 3-30 characters of letters, numbers or underscores")
        return username
    
    @staticmethod
    def validate_image_upload(filename: str, size: int) -> str:
        """Check extension and size of an uploaded image; returns the safe filename."""
        safe_name = SecurityValidator.sanitize_filename(filename)
        extension = '.' + safe_name.rsplit('.', 1)[-1].lower()
        
        if extension not in settings.allowed_upload_extensions:
            allowed = ", ".join(settings.allowed_upload_extensions)
            raise ValueError(f"File type not allowed. Allowed types: {allowed}")
        if size <= 0:
            raise ValueError("File is empty")
        if size > settings.max_upload_size_bytes:
            raise ValueError(f"File too large (max {settings.max_upload_size_mb}MB)")
        
        return safe_name


class BusinessValidator:
    """Validators for marketplace-specific rules."""
    
    @staticmethod
    def validate_display_name(name: str) -> str:
        """Display names are 2-50 characters; an empty value clears the name."""
        if not isinstance(name, str):
            raise ValueError("Display name must be a string")
        
        name = SecurityValidator.sanitize_html(name.strip())
        if name and not 2 <= len(name) <= 50:
            raise ValueError("Display name must be between 2 and 50 characters")
        return name
    
    @staticmethod
    def validate_post_title(title: str) -> str:
        """Validate post title with business rules."""
        if not isinstance(title, str):
            raise ValueError("Post title must be a string")
        
        title = title.strip()
        if len(title) > 120:
            raise ValueError("Post title is too long")
        
        SecurityValidator.check_xss(title)
        return SecurityValidator.sanitize_html(title)
    
    @staticmethod
    def validate_category(category: str) -> str:
        """Categories must be one of the configured marketplace categories."""
        if category not in settings.marketplace_categories:
            allowed = ", ".join(settings.marketplace_categories)
            raise ValueError(f"Unknown category. Use one of: {allowed}")
        return category
