"""Landing page."""
from fastapi import APIRouter, Request

from tracklister.api.rendering import render_page

router = APIRouter()


@router.get("/")
def index(request: Request):
    return render_page(request, "index.html", {"title": "Track lister"})
