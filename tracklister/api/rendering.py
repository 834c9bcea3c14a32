"""Jinja2 page rendering with a minimal built-in fallback body."""
import html
import logging
from typing import Any, Dict, Optional

import jinja2
from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from tracklister.config import TEMPLATES_DIR
from tracklister.errors import RenderFailed

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def fallback_page(error: BaseException) -> HTMLResponse:
    """Used when the templates themselves are broken."""
    return HTMLResponse(
        f"<p>500 Server error</p><p>{html.escape(str(error))}</p>",
        status_code=500,
    )


def render_page(
    request: Request,
    name: str,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
) -> Response:
    """Render ``name`` with ``context``; a template failure degrades to ``fallback_page``."""
    try:
        return templates.TemplateResponse(
            request,
            name,
            {"title": "Track lister", "warning": "", **(context or {})},
            status_code=status_code,
        )
    except jinja2.TemplateError as e:
        logger.error("server error: rendering %s failed: %s", name, e)
        return fallback_page(RenderFailed(f"{name}: {e}"))


def error_page(request: Request, message: str, *, title: str = "Server error", status_code: int = 500) -> Response:
    return render_page(request, "error.html", {"title": title, "warning": message}, status_code=status_code)


def not_found_page(request: Request) -> Response:
    return render_page(request, "not_found.html", {"title": "404 - not found"}, status_code=404)
