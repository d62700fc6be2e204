"""
Jinja2 environment shared by every page router.
"""
from pathlib import Path
from typing import Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from app.core.config import settings
from app.core.permissions import build_menu, role_label
from app.core.session import load_session, pop_flashes
from app.schemas.enums import label
from app.utils.dates import convert_utc_to_timezone, format_date, format_datetime
from app.utils.pdf import format_currency, month_label

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["currency"] = format_currency
templates.env.filters["date"] = format_date
templates.env.filters["datetime_tz"] = format_datetime
templates.env.filters["local_time"] = convert_utc_to_timezone
templates.env.filters["label"] = label
templates.env.filters["month_name"] = month_label


def render(request: Request, name: str, context: Optional[dict] = None, status_code: int = 200):
    """Render a page with the signed-in user, sidebar and pending toasts"""
    auth = load_session(request)
    ctx = {
        "app_name": settings.APP_NAME,
        "auth": auth,
        "role_label": role_label(auth),
        "menu": build_menu(auth, request.url.path),
        "flashes": pop_flashes(request),
        "time_zone": auth.time_zone if auth else settings.DEFAULT_TIMEZONE,
    }
    ctx.update(context or {})
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
