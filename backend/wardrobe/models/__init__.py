"""
SQLAlchemy ORM models.
"""
from wardrobe.models.user import User
from wardrobe.models.wardrobe_item import WardrobeItem

__all__ = [
    "User",
    "WardrobeItem",
]
