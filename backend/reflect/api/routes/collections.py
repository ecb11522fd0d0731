"""
Collection API routes
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.orm import Session

from reflect.core.auth import get_current_user_required
from reflect.core.database import get_db
from reflect.models.user import User
from reflect.services.collection_service import (CollectionNotFoundError,
                                                 CollectionService)

router = APIRouter(prefix="/api/collections", tags=["collections"])


class CollectionForm(BaseModel):
    """Collection dialog form"""
    model_config = ConfigDict(validate_default=True)

    name: str = Field(default="", max_length=255)
    description: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def name_required(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("Name is required")
        return value.strip() if isinstance(value, str) else value

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, value):
        if isinstance(value, str):
            value = value.strip()
        return value or None


class CollectionResponse(BaseModel):
    """Collection response model"""
    id: UUID
    name: str
    description: Optional[str] = None
    entry_count: int = 0
    created_at: datetime
    updated_at: datetime


def _response(collection, entry_count: int = 0) -> CollectionResponse:
    return CollectionResponse(
        id=collection.id,
        name=collection.name,
        description=collection.description,
        entry_count=entry_count,
        created_at=collection.created_at,
        updated_at=collection.updated_at,
    )


@router.get("", response_model=List[CollectionResponse])
async def list_collections(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_required)
):
    """List the current user's collections, newest first"""
    service = CollectionService(db, current_user.id)
    counts = service.entry_counts()
    return [_response(c, counts.get(c.id, 0)) for c in service.list_collections()]


@router.post("", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
async def create_collection(
    form: CollectionForm,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_required)
):
    """Create a collection"""
    try:
        collection = CollectionService(db, current_user.id).create_collection(
            name=form.name,
            description=form.description
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _response(collection)


@router.get("/{collection_id}", response_model=CollectionResponse)
async def get_collection(
    collection_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_required)
):
    """Get a collection by id"""
    service = CollectionService(db, current_user.id)
    collection = service.get_collection(collection_id)
    if not collection:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Collection not found"
        )
    return _response(collection, service.entry_counts().get(collection.id, 0))


@router.delete("/{collection_id}")
async def delete_collection(
    collection_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_required)
):
    """Delete a collection and every entry in it"""
    try:
        deleted_entries = CollectionService(db, current_user.id).delete_collection(collection_id)
    except CollectionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "deleted_entries": deleted_entries}
