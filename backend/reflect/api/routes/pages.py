"""
Page routes for the journaling web interface
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from reflect.core.auth import get_current_user_optional, get_page_user
from reflect.core.database import get_db
from reflect.core.templates import render_template
from reflect.models.user import User
from reflect.services.analytics_service import AnalyticsService
from reflect.services.collection_service import UNORGANIZED, CollectionService
from reflect.services.journal_service import JournalService, entry_payload

router = APIRouter(tags=["pages"])


def _parse_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(value)
    except ValueError:
        return None


def collection_heading(collection_id: str, collection) -> str:
    """Heading of the collection page"""
    if collection_id == UNORGANIZED:
        return "Unorganized Entries"
    if collection is not None:
        return collection.name
    return "Collection"


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    current_user: Optional[User] = Depends(get_current_user_optional)
):
    """Landing page; signed-in users go straight to their dashboard"""
    if current_user:
        return RedirectResponse("/dashboard", status_code=303)
    return render_template("index.html", request, {"current_user": None})


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard_page(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_page_user)
):
    """Collections overview with a mood summary"""
    collection_service = CollectionService(db, current_user.id)
    counts = collection_service.entry_counts()
    collections = [
        {"collection": c, "entry_count": counts.get(c.id, 0)}
        for c in collection_service.list_collections()
    ]
    analytics = AnalyticsService(db, current_user.id).get_analytics()

    return render_template(
        "dashboard.html",
        request,
        {
            "current_user": current_user,
            "collections": collections,
            "unorganized_count": counts.get(None, 0),
            "analytics": analytics,
        }
    )


@router.get("/journal/write", response_class=HTMLResponse)
async def write_page(
    request: Request,
    edit: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_page_user)
):
    """Entry editor; collections and the draft are fetched by the page"""
    entry = None
    if edit:
        entry_id = _parse_uuid(edit)
        found = JournalService(db, current_user.id).get_entry(entry_id) if entry_id else None
        entry = entry_payload(found) if found else None

    return render_template(
        "journal/write.html",
        request,
        {"current_user": current_user, "entry": entry}
    )


@router.get("/journal/{entry_id}", response_class=HTMLResponse)
async def entry_page(
    request: Request,
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_page_user)
):
    """Single entry, rendered read-only"""
    parsed = _parse_uuid(entry_id)
    entry = JournalService(db, current_user.id).get_entry(parsed) if parsed else None
    if not entry:
        return render_template(
            "not_found.html",
            request,
            {"current_user": current_user, "message": "Journal entry not found"},
            status_code=404
        )

    return render_template(
        "journal/entry.html",
        request,
        {
            "current_user": current_user,
            "entry": entry_payload(entry),
            "collection": entry.collection,
        }
    )


@router.get("/collection/{collection_id}", response_class=HTMLResponse)
async def collection_page(
    request: Request,
    collection_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_page_user)
):
    """Entries of one collection (or the unorganized ones) with client-side filters"""
    journal_service = JournalService(db, current_user.id)

    collection = None
    entries = []
    if collection_id == UNORGANIZED:
        entries = journal_service.list_entries(collection_id=UNORGANIZED)
    else:
        parsed = _parse_uuid(collection_id)
        if parsed:
            collection = CollectionService(db, current_user.id).get_collection(parsed)
            entries = journal_service.list_entries(collection_id=parsed)

    return render_template(
        "collection.html",
        request,
        {
            "current_user": current_user,
            "collection_id": collection_id,
            "collection": collection,
            "heading": collection_heading(collection_id, collection),
            "entries": [entry_payload(e) for e in entries],
        }
    )
