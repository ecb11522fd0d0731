"""
Journal service: creating, listing and editing mood-tagged entries
"""
import html
import re
from datetime import date
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from reflect.core.logging_config import LoggingConfig
from reflect.core.metrics import (journal_entries_by_mood_total,
                                  journal_entries_total)
from reflect.core.moods import Mood, get_mood_by_id
from reflect.models.journal import Draft, JournalEntry
from reflect.services.collection_service import UNORGANIZED, CollectionService
from reflect.utils.datetime_utils import day_bounds
from reflect.utils.images import is_allowed_image_url

logger = LoggingConfig.get_logger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")
PREVIEW_LENGTH = 150


def html_to_preview(content: Optional[str], length: int = PREVIEW_LENGTH) -> str:
    """Plain-text excerpt of editor HTML"""
    if not content:
        return ""
    text = _TAG_RE.sub(" ", content)
    text = _SPACE_RE.sub(" ", html.unescape(text)).strip()
    if len(text) > length:
        return text[:length].rstrip() + "..."
    return text


def entry_payload(entry: JournalEntry) -> Dict[str, Any]:
    """Entry as returned by the API, with its mood record and a preview"""
    mood = get_mood_by_id(entry.mood)
    return {
        "id": str(entry.id),
        "title": entry.title,
        "content": entry.content,
        "mood": entry.mood,
        "mood_score": entry.mood_score,
        "mood_query": entry.mood_query,
        "mood_image_url": entry.mood_image_url,
        "mood_data": mood.to_dict() if mood else None,
        "collection_id": str(entry.collection_id) if entry.collection_id else None,
        "preview": html_to_preview(entry.content),
        "created_at": entry.created_at.isoformat(),
        "updated_at": entry.updated_at.isoformat() if entry.updated_at else None,
    }


class JournalService:
    """Service for a user's journal entries and draft"""

    def __init__(self, db: Session, user_id: UUID):
        self.db = db
        self.user_id = user_id
        self.collections = CollectionService(db, user_id)

    def _query(self):
        return self.db.query(JournalEntry).filter(JournalEntry.user_id == self.user_id)

    def _resolve_mood(self, mood_id: str) -> Mood:
        mood = get_mood_by_id(mood_id)
        if not mood:
            raise ValueError("Invalid mood")
        return mood

    def _check_fields(
        self,
        mood_id: str,
        collection_id: Optional[UUID],
        mood_image_url: Optional[str]
    ) -> Mood:
        mood = self._resolve_mood(mood_id)
        if collection_id is not None:
            self.collections.require_collection(collection_id)
        if mood_image_url and not is_allowed_image_url(mood_image_url):
            raise ValueError("Image host is not allowed")
        return mood

    def create_entry(
        self,
        title: str,
        content: str,
        mood: str,
        collection_id: Optional[UUID] = None,
        mood_image_url: Optional[str] = None
    ) -> JournalEntry:
        """
        Create a journal entry and discard the user's draft

        The mood score and image query are copied from the mood catalogue so
        later catalogue changes do not rewrite history.

        Raises:
            ValueError: Unknown mood or disallowed image host
            CollectionNotFoundError: collection_id is missing or foreign
        """
        mood_record = self._check_fields(mood, collection_id, mood_image_url)

        entry = JournalEntry(
            title=title,
            content=content,
            mood=mood_record.id,
            mood_score=mood_record.score,
            mood_query=mood_record.pixabay_query,
            mood_image_url=mood_image_url or None,
            collection_id=collection_id,
            user_id=self.user_id
        )
        try:
            self.db.add(entry)
            self.db.query(Draft).filter(Draft.user_id == self.user_id).delete(synchronize_session=False)
            self.db.commit()
            self.db.refresh(entry)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error creating journal entry: {e}", exc_info=True)
            raise

        journal_entries_total.labels(operation="created").inc()
        journal_entries_by_mood_total.labels(mood=mood_record.id).inc()
        logger.info(
            "Created journal entry",
            extra={
                "entry_id": str(entry.id),
                "mood": mood_record.id,
                "collection_id": str(collection_id) if collection_id else None,
            }
        )
        return entry

    def list_entries(
        self,
        collection_id: Optional[Union[UUID, str]] = None,
        order: str = "desc",
        search: Optional[str] = None,
        mood: Optional[str] = None,
        on_date: Optional[date] = None
    ) -> List[JournalEntry]:
        """
        List entries with optional filters

        Args:
            collection_id: Collection UUID, or "unorganized" for entries
                without a collection; None lists everything
            order: "desc" (newest first) or "asc"
            search: Case-insensitive substring of title or content
            mood: Mood id
            on_date: Calendar day the entry was created on
        """
        query = self._query()

        if collection_id == UNORGANIZED:
            query = query.filter(JournalEntry.collection_id.is_(None))
        elif collection_id is not None:
            query = query.filter(JournalEntry.collection_id == collection_id)

        if search:
            term = search.strip().lower()
            query = query.filter(or_(
                func.lower(JournalEntry.title).contains(term, autoescape=True),
                func.lower(JournalEntry.content).contains(term, autoescape=True),
            ))

        if mood:
            query = query.filter(JournalEntry.mood == mood)

        if on_date:
            start, end = day_bounds(on_date)
            query = query.filter(JournalEntry.created_at >= start, JournalEntry.created_at < end)

        if order == "asc":
            query = query.order_by(JournalEntry.created_at.asc())
        else:
            query = query.order_by(JournalEntry.created_at.desc())

        return query.all()

    def get_entry(self, entry_id: UUID) -> Optional[JournalEntry]:
        return self._query().filter(JournalEntry.id == entry_id).first()

    def update_entry(
        self,
        entry_id: UUID,
        title: str,
        content: str,
        mood: str,
        collection_id: Optional[UUID] = None,
        mood_image_url: Optional[str] = None
    ) -> Optional[JournalEntry]:
        """Replace an entry's fields; None when the entry is not found"""
        entry = self.get_entry(entry_id)
        if not entry:
            return None

        mood_record = self._check_fields(mood, collection_id, mood_image_url)

        entry.title = title
        entry.content = content
        if entry.mood != mood_record.id:
            entry.mood_query = mood_record.pixabay_query
        entry.mood = mood_record.id
        entry.mood_score = mood_record.score
        entry.mood_image_url = mood_image_url or None
        entry.collection_id = collection_id

        try:
            self.db.commit()
            self.db.refresh(entry)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error updating journal entry {entry_id}: {e}", exc_info=True)
            raise

        journal_entries_total.labels(operation="updated").inc()
        logger.info("Updated journal entry", extra={"entry_id": str(entry_id)})
        return entry

    def delete_entry(self, entry_id: UUID) -> bool:
        entry = self.get_entry(entry_id)
        if not entry:
            return False

        try:
            self.db.delete(entry)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error deleting journal entry {entry_id}: {e}", exc_info=True)
            raise

        journal_entries_total.labels(operation="deleted").inc()
        logger.info("Deleted journal entry", extra={"entry_id": str(entry_id)})
        return True

    def get_draft(self) -> Optional[Draft]:
        return self.db.query(Draft).filter(Draft.user_id == self.user_id).first()

    def save_draft(
        self,
        title: Optional[str] = None,
        content: Optional[str] = None,
        mood: Optional[str] = None
    ) -> Draft:
        """Create or overwrite the user's draft"""
        try:
            draft = self.get_draft()
            if draft is None:
                draft = Draft(user_id=self.user_id)
                self.db.add(draft)

            draft.title = title
            draft.content = content
            draft.mood = mood or None

            self.db.commit()
            self.db.refresh(draft)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error saving draft: {e}", exc_info=True)
            raise
        logger.debug("Saved draft", extra={"user_id": str(self.user_id)})
        return draft
