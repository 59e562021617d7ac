"""
Services for authentication, sessions, storage, analysis and persistence.
"""
from wardrobe.services.auth_service import (
    hash_password,
    verify_password,
    needs_rehash,
)
from wardrobe.services.session_service import get_session_store, SessionStore
from wardrobe.services.storage_service import get_storage_service, StorageService
from wardrobe.services.vision_service import get_vision_analyzer, VisionAnalyzer

__all__ = [
    "hash_password",
    "verify_password",
    "needs_rehash",
    "get_session_store",
    "SessionStore",
    "get_storage_service",
    "StorageService",
    "get_vision_analyzer",
    "VisionAnalyzer",
]
