"""
Persistence for wardrobe items.

Every read and write is scoped to a single owner.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wardrobe.core.exceptions import PersistenceError
from wardrobe.models import WardrobeItem

logger = logging.getLogger(__name__)


@dataclass
class WardrobeItemDraft:
    """Item that has not been inserted yet."""
    category: str
    color: str


class WardrobeRepository:
    """Owner-scoped access to the ``wardrobe_items`` table."""

    def __init__(self, db: Session):
        self.db = db

    def insert_items(
        self,
        owner_id: UUID,
        drafts: Sequence[WardrobeItemDraft],
        timeout: Optional[float] = None,
    ) -> List[WardrobeItem]:
        """
        Insert a batch of items in one transaction.

        Args:
            owner_id: Owner of every inserted item
            drafts: Items to insert
            timeout: Statement timeout in seconds for this transaction
                (PostgreSQL only; other backends ignore it)

        Returns:
            Inserted items with server-assigned ids and timestamps

        Raises:
            PersistenceError: If the insert fails (nothing is written)
        """
        items = [
            WardrobeItem(owner_id=owner_id, category=draft.category, color=draft.color)
            for draft in drafts
        ]

        try:
            if timeout is not None:
                self._limit_statement_time(timeout)
            self.db.add_all(items)
            self.db.commit()
            for item in items:
                self.db.refresh(item)

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"DB insert error: {e}")
            raise PersistenceError("Failed to save clothing details to the database.")

        logger.info(f"Inserted {len(items)} wardrobe items for owner {owner_id}")
        return items

    def query(
        self,
        owner_id: UUID,
        category: Optional[str] = None,
        color: Optional[str] = None,
    ) -> List[WardrobeItem]:
        """
        List an owner's items with optional filters.

        Args:
            owner_id: Owner whose items are listed
            category: Case-insensitive substring of the stored category;
                ``%`` and ``_`` match themselves
            color: Exact stored color

        Returns:
            Matching items in database order

        Raises:
            PersistenceError: If the query fails
        """
        query = self.db.query(WardrobeItem).filter(WardrobeItem.owner_id == owner_id)

        if category:
            query = query.filter(WardrobeItem.category.icontains(category, autoescape=True))
        if color:
            query = query.filter(WardrobeItem.color == color)

        try:
            return query.all()

        except SQLAlchemyError as e:
            logger.error(f"DB select error: {e}")
            raise PersistenceError("Failed to retrieve wardrobe data.")

    def _limit_statement_time(self, timeout: float) -> None:
        # SET LOCAL lasts until the commit below
        if self.db.get_bind().dialect.name != "postgresql":
            return
        milliseconds = max(1, int(timeout * 1000))
        self.db.execute(text(f"SET LOCAL statement_timeout = {milliseconds}"))
