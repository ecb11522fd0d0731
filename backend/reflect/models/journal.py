"""
Journal models: collections, entries and per-user drafts
"""
from uuid import uuid4

from sqlalchemy import (Column, DateTime, ForeignKey, Integer, String, Text,
                        UniqueConstraint, Uuid)
from sqlalchemy.orm import relationship

from reflect.core.database import Base
from reflect.utils.datetime_utils import utc_now


class Collection(Base):
    """Named grouping of journal entries"""
    __tablename__ = "collections"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_collections_user_name"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    user = relationship("User", back_populates="collections")
    # Deleting a collection removes its entries
    entries = relationship("JournalEntry", back_populates="collection", cascade="all, delete")

    def __repr__(self):
        return f"<Collection(id={self.id}, name={self.name})>"


class JournalEntry(Base):
    """Mood-tagged journal entry; content is the editor's HTML"""
    __tablename__ = "journal_entries"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    mood = Column(String(50), nullable=False, index=True)
    mood_score = Column(Integer, nullable=False)
    mood_query = Column(String(255), nullable=True)
    mood_image_url = Column(String(1024), nullable=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    collection_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("collections.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )
    created_at = Column(DateTime, default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    user = relationship("User", back_populates="entries")
    collection = relationship("Collection", back_populates="entries")

    def __repr__(self):
        return f"<JournalEntry(id={self.id}, title={self.title}, mood={self.mood})>"


class Draft(Base):
    """Unsaved entry form, one per user"""
    __tablename__ = "drafts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )
    title = Column(String(255), nullable=True)
    content = Column(Text, nullable=True)
    mood = Column(String(50), nullable=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    user = relationship("User", back_populates="draft")

    def __repr__(self):
        return f"<Draft(id={self.id}, user_id={self.user_id})>"
