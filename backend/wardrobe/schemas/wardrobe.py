"""
Pydantic schemas for wardrobe items and the upload workflow.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class WardrobeItem(BaseModel):
    """Wardrobe item as returned to the owner."""
    id: UUID
    owner_id: UUID
    category: str
    color: str
    material: Optional[str] = None
    season: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UploadPhotoResponse(BaseModel):
    """Outcome of a photo upload. ``items`` is empty when nothing was found."""
    message: str
    items: List[WardrobeItem]


class ErrorResponse(BaseModel):
    """Body of every failure response."""
    error: str
    details: str
