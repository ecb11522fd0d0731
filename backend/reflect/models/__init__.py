"""
SQLAlchemy models
"""
from reflect.core.database import Base  # noqa: F401
# Import all models here so Alembic can detect them
from reflect.models.journal import Collection, Draft, JournalEntry  # noqa: F401
from reflect.models.user import Session, User, UserRole  # noqa: F401
