"""
Collection service: per-user groupings of journal entries
"""
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reflect.core.logging_config import LoggingConfig
from reflect.core.metrics import collections_total
from reflect.models.journal import Collection, JournalEntry

logger = LoggingConfig.get_logger(__name__)

# Pseudo collection id for entries that belong to no collection
UNORGANIZED = "unorganized"


class CollectionNotFoundError(LookupError):
    """Collection does not exist or belongs to another user"""


class CollectionService:
    """Service for managing a user's collections"""

    def __init__(self, db: Session, user_id: UUID):
        self.db = db
        self.user_id = user_id

    def _query(self):
        return self.db.query(Collection).filter(Collection.user_id == self.user_id)

    def list_collections(self) -> List[Collection]:
        """Collections of the user, newest first"""
        return self._query().order_by(Collection.created_at.desc()).all()

    def get_collection(self, collection_id: UUID) -> Optional[Collection]:
        return self._query().filter(Collection.id == collection_id).first()

    def require_collection(self, collection_id: UUID) -> Collection:
        collection = self.get_collection(collection_id)
        if not collection:
            raise CollectionNotFoundError("Collection not found")
        return collection

    def create_collection(self, name: str, description: Optional[str] = None) -> Collection:
        """
        Create a collection

        Raises:
            ValueError: If the user already has a collection with this name
        """
        if self._query().filter(Collection.name == name).first():
            raise ValueError(f"Collection '{name}' already exists")

        collection = Collection(
            name=name,
            description=description or None,
            user_id=self.user_id
        )
        try:
            self.db.add(collection)
            self.db.commit()
            self.db.refresh(collection)
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Collection '{name}' was created concurrently")
            raise ValueError(f"Collection '{name}' already exists")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error creating collection: {e}", exc_info=True)
            raise

        collections_total.labels(operation="created").inc()
        logger.info(
            f"Created collection: {name}",
            extra={"collection_id": str(collection.id), "user_id": str(self.user_id)}
        )
        return collection

    def delete_collection(self, collection_id: UUID) -> int:
        """
        Delete a collection together with its entries

        Returns:
            Number of entries removed with the collection

        Raises:
            CollectionNotFoundError: If the collection is missing or foreign
        """
        collection = self.require_collection(collection_id)
        entry_count = len(collection.entries)
        try:
            self.db.delete(collection)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error deleting collection {collection_id}: {e}", exc_info=True)
            raise

        collections_total.labels(operation="deleted").inc()
        logger.info(
            f"Deleted collection {collection_id} with {entry_count} entries",
            extra={"user_id": str(self.user_id)}
        )
        return entry_count

    def entry_counts(self) -> Dict[Optional[UUID], int]:
        """Number of entries per collection id; None counts unorganized entries"""
        rows = (
            self.db.query(JournalEntry.collection_id, func.count(JournalEntry.id))
            .filter(JournalEntry.user_id == self.user_id)
            .group_by(JournalEntry.collection_id)
            .all()
        )
        return {collection_id: count for collection_id, count in rows}
