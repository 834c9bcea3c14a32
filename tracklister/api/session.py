"""Session cookie carriage for the bearer token."""
from starlette.responses import Response

from tracklister.config import Settings
from tracklister.models.token import SessionToken


def set_session_cookie(response: Response, token: SessionToken, settings: Settings) -> None:
    """Cookie value is the access token, expiring with it."""
    response.set_cookie(
        settings.cookie_name,
        token.access_token,
        max_age=token.seconds_left(),
        expires=token.expires_at,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        settings.cookie_name,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )
