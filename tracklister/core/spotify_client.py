"""Spotify access via Spotipy: code-for-token exchange and album/playlist reads."""
import logging
from typing import Optional

from spotipy import Spotify
from spotipy.cache_handler import MemoryCacheHandler
from spotipy.oauth2 import SpotifyOAuth

from tracklister.config import Settings

logger = logging.getLogger(__name__)


class SpotipyAuthorizer:
    """Builds authorize URLs and exchanges codes. Tokens never touch disk."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def _oauth(self, cache: Optional[MemoryCacheHandler] = None) -> SpotifyOAuth:
        return SpotifyOAuth(
            client_id=self._settings.client_id,
            client_secret=self._settings.client_secret,
            redirect_uri=self._settings.redirect_uri,
            scope=self._settings.scopes,
            cache_handler=cache or MemoryCacheHandler(),
            requests_timeout=self._settings.upstream_timeout,
            open_browser=False,
        )

    def authorize_url(self, state: str) -> str:
        return self._oauth().get_authorize_url(state=state)

    def exchange_code(self, code: str) -> dict:
        """Return Spotify's token info (access_token, expires_in, expires_at, ...).

        Raises SpotifyOauthError or a requests exception on failure.
        """
        # One cache per exchange so concurrent callbacks never share a token
        cache = MemoryCacheHandler()
        self._oauth(cache).get_access_token(code=code, as_dict=False, check_cache=False)
        return cache.get_cached_token() or {}


class SpotipyCatalogSource:
    """Album and playlist reads for one bearer token, following paging links."""

    def __init__(self, access_token: str, timeout: float = 10.0, max_pages: int = 10) -> None:
        # retries=0: a single upstream failure surfaces immediately
        self._sp = Spotify(
            auth=access_token,
            requests_timeout=timeout,
            retries=0,
            status_retries=0,
        )
        self._max_pages = max(1, max_pages)

    def _collect(self, tracks: Optional[dict]) -> dict:
        """Merge all pages of a paging object into the first one's ``items``."""
        tracks = dict(tracks or {})
        items = list(tracks.get("items") or [])
        page = tracks
        pages = 1
        while page.get("next") and pages < self._max_pages:
            page = self._sp.next(page) or {}
            items.extend(page.get("items") or [])
            pages += 1
        if page.get("next"):
            logger.info("Stopped after %d pages of %s tracks", pages, tracks.get("total"))
        tracks["items"] = items
        return tracks

    def get_album(self, album_id: str) -> dict:
        album = self._sp.album(album_id) or {}
        album["tracks"] = self._collect(album.get("tracks"))
        return album

    def get_playlist(self, playlist_id: str) -> dict:
        playlist = self._sp.playlist(playlist_id) or {}
        playlist["tracks"] = self._collect(playlist.get("tracks"))
        return playlist
