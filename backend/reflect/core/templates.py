"""
Template rendering utilities
"""
from pathlib import Path
from typing import Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from reflect.core.config import get_settings
from reflect.core.moods import list_moods

# backend/reflect/core/templates.py -> project root
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
TEMPLATES_DIR = BASE_DIR / "frontend" / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

_settings = get_settings()
templates.env.globals.update(
    app_name=_settings.app_name,
    app_description=_settings.app_description,
    moods=list_moods(),
    moods_data=[mood.to_dict() for mood in list_moods()],
)


def render_template(template_name: str, request: Request, context: Optional[dict] = None, status_code: int = 200):
    """Render template with context"""
    return templates.TemplateResponse(request, template_name, context or {}, status_code=status_code)
