"""
Jinja2 template rendering shared by the page routers.
"""
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from carwash.auth import AuthContext
from carwash.config import get_settings

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


def profile_image_url(path: Optional[str]) -> Optional[str]:
    """Absolute URL for an image path served by the backend."""
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    return get_settings().api_asset_url.rstrip("/") + "/" + path.lstrip("/")


def money(value: Optional[float]) -> str:
    return f"{value or 0:,.2f}"


templates.env.filters["image_url"] = profile_image_url
templates.env.filters["money"] = money


def render(
    request: Request,
    name: str,
    auth: Optional[AuthContext] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
):
    """Render a page with the signed-in user and pending toasts."""
    page = {
        "app_name": get_settings().app_name,
        "user": auth.user if auth else None,
        "toasts": auth.pop_toasts() if auth else [],
    }
    page.update(context or {})
    return templates.TemplateResponse(request, name, page, status_code=status_code)
