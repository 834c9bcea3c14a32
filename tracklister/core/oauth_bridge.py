"""OAuth bridge: authorization redirects, callback completion, cookie-borne tokens.

Unauthenticated --(authorization_url)--> AuthorizationRequested
AuthorizationRequested --(complete_authorization)--> Authenticated

The browser owns the token (cookie). The server only remembers which
``state`` values it handed out, for one callback each.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional, Protocol, Union

import requests
from spotipy.oauth2 import SpotifyOauthError

from tracklister.config import Settings
from tracklister.core.state_store import StateStore
from tracklister.errors import (
    AuthorizationDenied,
    AuthorizationUnavailable,
    AuthStateMismatch,
    TokenExchangeFailed,
)
from tracklister.models.token import AuthorizationRedirect, SessionToken

logger = logging.getLogger(__name__)


class Authorizer(Protocol):
    def authorize_url(self, state: str) -> str: ...

    def exchange_code(self, code: str) -> dict: ...


class OAuthBridge:
    def __init__(
        self,
        settings: Settings,
        state_store: StateStore,
        authorizer: Authorizer,
        now_fn: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._settings = settings
        self._states = state_store
        self._authorizer = authorizer
        self._now = now_fn or (lambda: datetime.now(timezone.utc))

    def authorization_url(self) -> AuthorizationRedirect:
        """Fresh state, registered for one callback, embedded in Spotify's authorize URL."""
        if not self._settings.has_credentials:
            raise AuthorizationUnavailable("Spotify credentials not configured")
        state = self._states.issue()
        logger.debug("Authorization requested, callback %s", self._settings.redirect_uri)
        try:
            url = self._authorizer.authorize_url(state)
        except SpotifyOauthError as e:
            logger.error("Couldn't build authorization URL: %s", e)
            raise AuthorizationUnavailable(str(e)) from e
        return AuthorizationRedirect(url=url, state=state)

    def ensure_token(self, cookie_value: Optional[str]) -> Union[SessionToken, AuthorizationRedirect]:
        """Token from the session cookie, or where to send the browser to get one."""
        if cookie_value is None or not cookie_value.strip():
            return self.authorization_url()
        return SessionToken(access_token=cookie_value)

    def complete_authorization(self, params: Mapping[str, str]) -> SessionToken:
        """Validate the callback and trade its code for a token.

        Raises AuthStateMismatch before any exchange if ``state`` is unknown,
        reused or expired; TokenExchangeFailed (or AuthorizationDenied) if no
        token came back.
        """
        state = params.get("state")
        if not self._states.consume(state):
            logger.warning("State mismatch: %r is not a pending authorization", state)
            raise AuthStateMismatch("state mismatch")

        error = params.get("error")
        if error:
            logger.warning("Authorization denied: %s", error)
            raise AuthorizationDenied(error)

        code = params.get("code")
        if not code:
            raise TokenExchangeFailed("missing authorization code")

        try:
            token_info = self._authorizer.exchange_code(code)
        except (SpotifyOauthError, requests.RequestException) as e:
            logger.warning("Couldn't get token: %s", e)
            raise TokenExchangeFailed(str(e)) from e

        access_token = (token_info or {}).get("access_token")
        if not access_token:
            raise TokenExchangeFailed("no access token in response")

        token = SessionToken(
            access_token=access_token,
            expires_at=self._expiry(token_info),
            token_type=token_info.get("token_type") or "Bearer",
        )
        if token.is_expired(self._now()):
            raise TokenExchangeFailed("token already expired")
        logger.info("New auth expires %s", token.expires_at)
        return token

    def _expiry(self, token_info: Mapping) -> Optional[datetime]:
        expires_at = token_info.get("expires_at")
        if expires_at:
            return datetime.fromtimestamp(int(expires_at), tz=timezone.utc)
        expires_in = token_info.get("expires_in")
        if expires_in:
            return self._now() + timedelta(seconds=int(expires_in))
        return None
