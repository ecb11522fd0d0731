"""
Authentication dependencies
"""
from typing import Optional
from urllib.parse import quote

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from reflect.core.database import get_db
from reflect.core.logging_config import LoggingConfig
from reflect.models.user import User
from reflect.services.auth_service import AuthService

logger = LoggingConfig.get_logger(__name__)

SESSION_COOKIE = "session_token"

# HTTP Bearer security scheme
security = HTTPBearer(auto_error=False)


class LoginRequired(Exception):
    """Raised by page dependencies; answered with a redirect to the login page"""

    def __init__(self, next_path: str):
        self.next_path = next_path

    @property
    def login_url(self) -> str:
        return f"/auth/login?next={quote(self.next_path, safe='/')}"


def extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None
) -> Optional[str]:
    """Session token from the Authorization header, else from the cookie"""
    if credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE)


async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Get current user if authenticated, otherwise return None

    The database is only queried when a token is present.
    """
    token = extract_token(request, credentials)
    if not token:
        return None

    user = AuthService(db).validate_session(token)
    if user:
        LoggingConfig.set_context(user_id=str(user.id))
    return user


async def get_current_user_required(
    user: Optional[User] = Depends(get_current_user_optional)
) -> User:
    """
    Require authentication: return User or raise 401
    """
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_page_user(
    request: Request,
    user: Optional[User] = Depends(get_current_user_optional)
) -> User:
    """
    Page variant of get_current_user_required: anonymous visitors are sent
    to the login page and brought back afterwards
    """
    if not user:
        next_path = request.url.path
        if request.url.query:
            next_path = f"{next_path}?{request.url.query}"
        raise LoginRequired(next_path)
    return user
