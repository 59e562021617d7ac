"""
Wardrobe item model.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import relationship

from wardrobe.core.database import Base


class WardrobeItem(Base):
    """
    Garment detected in an uploaded photo.

    Rows are only created by the ingestion pipeline and are never updated.
    ``material`` and ``season`` are reserved and left empty by the pipeline.
    """
    __tablename__ = "wardrobe_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category = Column(String(255), nullable=False)
    color = Column(String(64), nullable=False, default="unknown")
    material = Column(String(100), nullable=True)
    season = Column(String(50), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    owner = relationship("User", back_populates="wardrobe_items")

    __table_args__ = (
        Index("idx_wardrobe_items_owner_color", "owner_id", "color"),
    )

    def __repr__(self):
        return f"<WardrobeItem {self.category} ({self.color})>"
