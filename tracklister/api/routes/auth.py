"""Spotify OAuth: callback and logout."""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from tracklister.api.rendering import error_page, not_found_page
from tracklister.api.session import clear_session_cookie, set_session_cookie
from tracklister.api.state import AppState, get_state
from tracklister.errors import AuthStateMismatch, TokenExchangeFailed

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/callback")
def spotify_callback(request: Request, state: AppState = Depends(get_state)):
    """Check the state, exchange the code, store the token in the session cookie."""
    try:
        token = state.oauth_bridge.complete_authorization(request.query_params)
    except AuthStateMismatch:
        return not_found_page(request)
    except TokenExchangeFailed as e:
        return error_page(request, str(e), title="Couldn't get token", status_code=403)

    response = RedirectResponse(url="/search", status_code=302)
    set_session_cookie(response, token, state.settings)
    return response


@router.get("/logout")
def logout(state: AppState = Depends(get_state)):
    """Forget the token; the next search starts a new authorization."""
    response = RedirectResponse(url="/", status_code=302)
    clear_session_cookie(response, state.settings)
    return response
