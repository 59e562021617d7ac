"""
Pydantic schemas for request/response validation.
"""
from wardrobe.schemas.user import (
    User,
    UserCreate,
    UserLogin,
    UserLoginResponse,
)
from wardrobe.schemas.wardrobe import (
    WardrobeItem,
    UploadPhotoResponse,
    ErrorResponse,
)

__all__ = [
    # User schemas
    "User",
    "UserCreate",
    "UserLogin",
    "UserLoginResponse",
    # Wardrobe schemas
    "WardrobeItem",
    "UploadPhotoResponse",
    "ErrorResponse",
]
