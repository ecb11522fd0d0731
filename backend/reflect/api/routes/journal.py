"""
Journal entry API routes
"""
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from sqlalchemy.orm import Session

from reflect.core.auth import get_current_user_required
from reflect.core.database import get_db
from reflect.core.logging_config import LoggingConfig
from reflect.models.user import User
from reflect.services.collection_service import (UNORGANIZED,
                                                 CollectionNotFoundError)
from reflect.services.journal_service import JournalService, entry_payload

router = APIRouter(prefix="/api/journal", tags=["journal"])
logger = LoggingConfig.get_logger(__name__)

REQUIRED_MESSAGES = {
    "title": "Title is required",
    "content": "Content is required",
    "mood": "Mood is required",
}


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class JournalEntryForm(BaseModel):
    """Entry form as submitted by the write page"""
    model_config = ConfigDict(validate_default=True)

    title: str = Field(default="", max_length=255)
    content: str = ""
    mood: str = ""
    collection_id: Optional[UUID] = None
    mood_image_url: Optional[str] = Field(default=None, max_length=1024)

    @field_validator("title", "content", "mood", mode="before")
    @classmethod
    def required(cls, value, info: ValidationInfo):
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError(REQUIRED_MESSAGES[info.field_name])
        if info.field_name == "content":
            return value
        return value.strip() if isinstance(value, str) else value

    @field_validator("collection_id", "mood_image_url", mode="before")
    @classmethod
    def optional(cls, value):
        return _blank_to_none(value)


class DraftForm(BaseModel):
    """Partial entry form; nothing is required"""
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
    mood: Optional[str] = None


def _service(db: Session, user: User) -> JournalService:
    return JournalService(db, user.id)


def _draft_payload(draft) -> dict:
    return {
        "title": draft.title,
        "content": draft.content,
        "mood": draft.mood,
        "updated_at": draft.updated_at.isoformat(),
    }


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Journal entry not found"
    )


@router.get("")
async def list_entries(
    collection_id: Optional[str] = Query(None, description='Collection id or "unorganized"'),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    search: Optional[str] = None,
    mood: Optional[str] = None,
    on_date: Optional[date] = Query(None, alias="date", description="Only entries created on this day (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_required)
):
    """List the current user's entries"""
    collection_filter = None
    if collection_id == UNORGANIZED:
        collection_filter = UNORGANIZED
    elif collection_id:
        try:
            collection_filter = UUID(collection_id)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid collection id"
            )

    entries = _service(db, current_user).list_entries(
        collection_id=collection_filter,
        order=order,
        search=search,
        mood=mood,
        on_date=on_date
    )
    return {
        "success": True,
        "data": {"entries": [entry_payload(entry) for entry in entries]}
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_entry(
    form: JournalEntryForm,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_required)
):
    """Create a journal entry"""
    try:
        entry = _service(db, current_user).create_entry(
            title=form.title,
            content=form.content,
            mood=form.mood,
            collection_id=form.collection_id,
            mood_image_url=form.mood_image_url
        )
    except CollectionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return entry_payload(entry)


@router.get("/draft")
async def get_draft(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_required)
):
    """Get the current user's draft, or null"""
    draft = _service(db, current_user).get_draft()
    return {"success": True, "data": _draft_payload(draft) if draft else None}


@router.put("/draft")
async def save_draft(
    form: DraftForm,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_required)
):
    """Save (create or overwrite) the current user's draft"""
    draft = _service(db, current_user).save_draft(
        title=form.title,
        content=form.content,
        mood=form.mood
    )
    return {"success": True, "data": _draft_payload(draft)}


@router.get("/{entry_id}")
async def get_entry(
    entry_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_required)
):
    """Get a journal entry by id"""
    entry = _service(db, current_user).get_entry(entry_id)
    if not entry:
        raise _not_found()
    return entry_payload(entry)


@router.put("/{entry_id}")
async def update_entry(
    entry_id: UUID,
    form: JournalEntryForm,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_required)
):
    """Update a journal entry"""
    try:
        entry = _service(db, current_user).update_entry(
            entry_id,
            title=form.title,
            content=form.content,
            mood=form.mood,
            collection_id=form.collection_id,
            mood_image_url=form.mood_image_url
        )
    except CollectionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not entry:
        raise _not_found()
    return entry_payload(entry)


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_required)
):
    """Delete a journal entry"""
    if not _service(db, current_user).delete_entry(entry_id):
        raise _not_found()
    return {"success": True}
