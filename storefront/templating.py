from pathlib import Path
from typing import Any, Optional

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from .config import settings
from .services.payment_handoff import format_money

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["money"] = format_money


def render(
        request: Request,
        name: str,
        ctx: Optional[dict[str, Any]] = None,
        context=None,
        status_code: int = 200
) -> HTMLResponse:
    base = {
        "title": settings.app_name,
        "cart_count": context.cart.total_items if context else 0,
        "is_admin": context.is_admin if context else False,
    }
    base.update(ctx or {})
    return templates.TemplateResponse(request, name, base, status_code=status_code)
