"""
Authentication web pages
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from reflect.core.auth import get_current_user_optional
from reflect.core.templates import render_template
from reflect.models.user import User

router = APIRouter(tags=["auth_pages"])


def safe_next(next_path: Optional[str]) -> str:
    """Only same-site relative paths are followed after login"""
    if next_path and next_path.startswith("/") and not next_path.startswith("//") and "\\" not in next_path:
        return next_path
    return "/dashboard"


@router.get("/auth/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    next: Optional[str] = None,
    current_user: Optional[User] = Depends(get_current_user_optional)
):
    """Login page"""
    if current_user:
        return RedirectResponse(safe_next(next), status_code=303)
    return render_template("auth/login.html", request, {"next": safe_next(next), "current_user": None})


@router.get("/auth/register", response_class=HTMLResponse)
async def register_page(
    request: Request,
    next: Optional[str] = None,
    current_user: Optional[User] = Depends(get_current_user_optional)
):
    """Register page"""
    if current_user:
        return RedirectResponse(safe_next(next), status_code=303)
    return render_template("auth/register.html", request, {"next": safe_next(next), "current_user": None})
