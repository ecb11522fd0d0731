"""
Authentication service for user management and sessions
"""
import secrets
from datetime import timedelta
from typing import Optional
from uuid import UUID

import bcrypt
from sqlalchemy.orm import Session

from reflect.core.config import get_settings
from reflect.core.logging_config import LoggingConfig
from reflect.core.metrics import auth_events_total
from reflect.models.user import Session as UserSession
from reflect.models.user import User, UserRole
from reflect.utils.datetime_utils import utc_now

logger = LoggingConfig.get_logger(__name__)

# bcrypt rejects longer secrets
MAX_PASSWORD_BYTES = 72


class AuthService:
    """Service for user authentication and session management"""

    def __init__(self, db: Session):
        self.db = db
        self.session_duration_hours = get_settings().session_duration_hours

    def register_user(
        self,
        username: str,
        email: str,
        password: str,
        role: str = UserRole.USER.value
    ) -> User:
        """
        Register a new user

        Raises:
            ValueError: If username or email already exists
        """
        if self.db.query(User).filter(User.username == username).first():
            raise ValueError(f"Username '{username}' already exists")

        if self.db.query(User).filter(User.email == email).first():
            raise ValueError(f"Email '{email}' already exists")

        user = User(
            username=username,
            email=email,
            password_hash=self._hash_password(password),
            role=role,
            is_active=True
        )

        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except Exception:
            self.db.rollback()
            raise

        auth_events_total.labels(event="register").inc()
        logger.info(f"Registered new user: {username}", extra={"user_id": str(user.id)})
        return user

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """
        Authenticate a user by username (or email) and password

        Returns:
            User object if authentication successful, None otherwise
        """
        user = self.db.query(User).filter(
            (User.username == username) | (User.email == username)
        ).first()

        if not user or not user.is_active or not self._verify_password(password, user.password_hash):
            auth_events_total.labels(event="login_failed").inc()
            logger.warning(f"Authentication failed for '{username}'")
            return None

        user.last_login = utc_now()
        self.db.commit()

        auth_events_total.labels(event="login").inc()
        logger.info(f"User '{username}' authenticated successfully")
        return user

    def create_session(self, user_id: UUID, duration_hours: Optional[int] = None) -> UserSession:
        """Create a new session with a random url-safe token"""
        duration = duration_hours or self.session_duration_hours
        session = UserSession(
            user_id=user_id,
            token=secrets.token_urlsafe(32),
            expires_at=utc_now() + timedelta(hours=duration)
        )

        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)

        logger.info(f"Created session for user {user_id}")
        return session

    def validate_session(self, token: str) -> Optional[User]:
        """
        Validate a session token and return the associated user

        Expired sessions are deleted on sight.
        """
        session = self.db.query(UserSession).filter(
            UserSession.token == token
        ).first()

        if not session:
            return None

        if session.expires_at < utc_now():
            logger.info(f"Session {session.id} expired")
            self.db.delete(session)
            self.db.commit()
            return None

        session.last_activity = utc_now()
        self.db.commit()

        user = self.db.query(User).filter(User.id == session.user_id).first()
        if not user or not user.is_active:
            return None

        return user

    def logout(self, token: str) -> bool:
        """Invalidate a session; returns False when the token is unknown"""
        session = self.db.query(UserSession).filter(
            UserSession.token == token
        ).first()

        if not session:
            return False

        self.db.delete(session)
        self.db.commit()
        auth_events_total.labels(event="logout").inc()
        logger.info(f"Session {session.id} invalidated")
        return True

    def cleanup_expired_sessions(self) -> int:
        """Remove all expired sessions, returning how many were deleted"""
        count = self.db.query(UserSession).filter(
            UserSession.expires_at < utc_now()
        ).delete(synchronize_session=False)
        self.db.commit()
        if count:
            logger.info(f"Cleaned up {count} expired sessions")
        return count

    def _hash_password(self, password: str) -> str:
        """Hash a password using bcrypt"""
        hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
        return hashed.decode('utf-8')

    def _verify_password(self, password: str, password_hash: str) -> bool:
        if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
