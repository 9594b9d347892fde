"""
Supabase Storage service for marketplace images.
Avatars and post images live in one public bucket, one folder per kind and user.
"""

import logging
import mimetypes
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime
import hashlib
from urllib.parse import urlparse

from supabase import Client
from app.config import settings
from app.infrastructure.auth.supabase_client import get_supabase_admin_client
from app.domain.models.base import ValidationError


logger = logging.getLogger(__name__)

AVATARS_FOLDER = "avatars"
POST_COVERS_FOLDER = "post-covers"
POST_IMAGES_FOLDER = "post-images"


class StorageService:
    """Service for managing file storage using Supabase Storage."""
    
    def __init__(self, supabase_client: Client, bucket: Optional[str] = None):
        """Initialize storage service with Supabase client."""
        self.client = supabase_client
        self.bucket = bucket or settings.storage_bucket
        self.allowed_types = ["image/jpeg", "image/png", "image/gif", "image/webp"]
    
    async def upload_image(
        self,
        file_content: bytes,
        filename: str,
        folder: str,
        user_id: str,
        content_type: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Upload an image to the public bucket.
        
        Args:
            file_content: File content as bytes
            filename: Original filename
            folder: Folder within the bucket (avatars, post-covers, post-images)
            user_id: Owner, used as a sub-folder
            content_type: MIME type of the file
            
        Returns:
            Dict with the storage path and public URL
        """
        if not content_type or content_type == "application/octet-stream":
            content_type, _ = mimetypes.guess_type(filename)
        
        self._validate_file(file_content, content_type)
        
        file_path = self._generate_file_path(filename, folder, user_id)
        
        try:
            self.client.storage.from_(self.bucket).upload(
                path=file_path,
                file=file_content,
                file_options={
                    "content-type": content_type,
                    "cache-control": "3600",
                    "upsert": "true"
                }
            )
            public_url = self.client.storage.from_(self.bucket).get_public_url(file_path)
        except Exception as e:
            logger.error(f"Upload of {file_path} failed: {str(e)}")
            raise ValidationError(f"Failed to upload file: {str(e)}")
        
        logger.info(f"Uploaded {file_path} ({len(file_content)} bytes)")
        return {
            "file_path": file_path,
            "bucket": self.bucket,
            "public_url": public_url,
            "content_type": content_type,
            "file_size": len(file_content),
            "uploaded_at": datetime.utcnow().isoformat()
        }
    
    async def delete_file(self, file_path: str) -> bool:
        """
        Delete a file from storage.
        
        Args:
            file_path: Path to file in storage
            
        Returns:
            True if successful
        """
        try:
            self.client.storage.from_(self.bucket).remove([file_path])
            return True
        except Exception as e:
            raise ValidationError(f"Failed to delete file: {str(e)}")
    
    async def delete_by_url(self, public_url: Optional[str]) -> bool:
        """Delete a previously uploaded file given its public URL; foreign URLs are ignored."""
        file_path = self.path_from_public_url(public_url)
        if not file_path:
            return False
        try:
            return await self.delete_file(file_path)
        except ValidationError as e:
            logger.warning(f"Could not delete replaced file {file_path}: {e.message}")
            return False
    
    def path_from_public_url(self, public_url: Optional[str]) -> Optional[str]:
        """Storage path of a public URL of this bucket."""
        if not public_url:
            return None
        marker = f"/storage/v1/object/public/{self.bucket}/"
        path = urlparse(public_url).path
        if marker not in path:
            return None
        return path.split(marker, 1)[1] or None
    
    def _validate_file(self, content: bytes, content_type: Optional[str]) -> None:
        """Validate file before upload."""
        if not content:
            raise ValidationError("File content is empty")
        
        if len(content) > settings.max_upload_size_bytes:
            raise ValidationError(f"File too large. Maximum size: {settings.max_upload_size_mb}MB")
        
        if content_type not in self.allowed_types:
            raise ValidationError(f"File type not allowed: {content_type}")
    
    def _generate_file_path(self, filename: str, folder: str, user_id: str) -> str:
        """Generate unique file path for storage."""
        safe_filename = self._sanitize_filename(filename)
        
        # Generate hash for uniqueness
        timestamp = datetime.utcnow().strftime("%Y%m%d%H%M%S%f")
        hash_part = hashlib.md5(f"{safe_filename}{timestamp}".encode()).hexdigest()[:8]
        
        name_without_ext = Path(safe_filename).stem
        extension = Path(safe_filename).suffix.lower()
        return f"{folder}/{user_id}/{name_without_ext}_{hash_part}{extension}"
    
    def _sanitize_filename(self, filename: str) -> str:
        """Sanitize filename for safe storage."""
        safe_chars = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._-"
        safe_name = "".join(c if c in safe_chars else "_" for c in Path(filename).name)
        
        if len(safe_name) > 100:
            name_part = Path(safe_name).stem[:80]
            ext_part = Path(safe_name).suffix
            safe_name = f"{name_part}{ext_part}"
        
        return safe_name


# Create singleton instance with lazy initialization
_storage_service = None

def get_storage_service() -> StorageService:
    """Get singleton storage service instance."""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService(get_supabase_admin_client())
    return _storage_service
