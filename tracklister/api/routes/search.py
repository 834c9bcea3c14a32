"""Search: resolve a playlist/album reference and list its tracks."""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse

from tracklister.api.rendering import error_page, render_page
from tracklister.api.session import clear_session_cookie
from tracklister.api.state import AppState, get_state
from tracklister.core.resolver import resolve
from tracklister.errors import AuthorizationUnavailable, TokenRejected, UpstreamFetchFailed
from tracklister.models.token import AuthorizationRedirect

router = APIRouter()

INVALID_REFERENCE_WARNING = "That did not look like a valid search term"


def _redirect_to_spotify(request: Request, state: AppState, redirect: Optional[AuthorizationRedirect] = None):
    """302 to the authorize URL, or a 503 page when none can be built."""
    try:
        redirect = redirect or state.oauth_bridge.authorization_url()
    except AuthorizationUnavailable as e:
        return error_page(request, str(e), title="Spotify sign-in unavailable", status_code=503)
    return RedirectResponse(url=redirect.url, status_code=302)


async def _form_value(request: Request, name: str) -> str:
    """Form body first, then query string."""
    if request.method == "POST":
        form = await request.form()
        value = form.get(name)
        if isinstance(value, str) and value:
            return value
    return request.query_params.get(name, "")


@router.api_route("/search", methods=["GET", "POST"])
async def search(request: Request, state: AppState = Depends(get_state)):
    """Redirect to Spotify without a token; otherwise render the form and any tracks."""
    cookie = request.cookies.get(state.settings.cookie_name)
    try:
        token = state.oauth_bridge.ensure_token(cookie)
    except AuthorizationUnavailable as e:
        return error_page(request, str(e), title="Spotify sign-in unavailable", status_code=503)
    if isinstance(token, AuthorizationRedirect):
        return _redirect_to_spotify(request, state, token)

    reference = resolve(await _form_value(request, "playlist"))
    context = {
        "title": "Search",
        "playlist_id": reference.raw,
        "reference": reference,
        "tracks": [],
    }
    if reference.is_blank:
        return render_page(request, "search.html", context)
    if not reference.is_valid:
        context["warning"] = INVALID_REFERENCE_WARNING
        return render_page(request, "search.html", context)

    try:
        # spotipy is blocking; keep it off the event loop
        context["tracks"] = await run_in_threadpool(state.catalog.fetch, reference, token)
    except TokenRejected:
        response = _redirect_to_spotify(request, state)
        clear_session_cookie(response, state.settings)
        return response
    except UpstreamFetchFailed as e:
        context["warning"] = e.message
    return render_page(request, "search.html", context)
