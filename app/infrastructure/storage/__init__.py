"""
File storage over Supabase Storage.
"""

from .storage_service import (
    StorageService, get_storage_service,
    AVATARS_FOLDER, POST_COVERS_FOLDER, POST_IMAGES_FOLDER
)

__all__ = [
    "StorageService",
    "get_storage_service",
    "AVATARS_FOLDER",
    "POST_COVERS_FOLDER",
    "POST_IMAGES_FOLDER",
]
