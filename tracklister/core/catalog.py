"""Catalog query dispatch: pick the album or playlist read, flatten to TrackRows."""
import logging
from typing import Callable, Iterable, List, Optional, Protocol

import requests
from spotipy.exceptions import SpotifyException

from tracklister.errors import InvalidReference, TokenRejected, UpstreamFetchFailed
from tracklister.models.reference import ReferenceKind, ResolvedReference
from tracklister.models.token import SessionToken
from tracklister.models.track import TrackRow

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    def get_album(self, album_id: str) -> dict: ...

    def get_playlist(self, playlist_id: str) -> dict: ...


def track_row(track: dict) -> TrackRow:
    """Flatten one (simplified or full) track object.

    Only fields present on simplified tracks are read, so album and playlist
    tracks give identical rows.
    """
    artists = tuple(a.get("name") or "" for a in (track.get("artists") or []))
    return TrackRow(
        title=track.get("name") or "",
        artists=artists,
        duration_ms=int(track.get("duration_ms") or 0),
        track_number=int(track.get("track_number") or 0),
        disc_number=int(track.get("disc_number") or 1),
        explicit=bool(track.get("explicit", False)),
        track_id=track.get("id"),
        url=(track.get("external_urls") or {}).get("spotify"),
    )


def _items(payload: Optional[dict]) -> Iterable[dict]:
    return ((payload or {}).get("tracks") or {}).get("items") or []


def flatten_album(payload: dict) -> List[TrackRow]:
    return [track_row(t) for t in _items(payload) if t]


def flatten_playlist(payload: dict) -> List[TrackRow]:
    """Playlist entries wrap the track; removed or local-only entries have none."""
    rows = []
    for entry in _items(payload):
        track = (entry or {}).get("track")
        if track:
            rows.append(track_row(track))
    return rows


class CatalogDispatcher:
    def __init__(self, source_factory: Callable[[SessionToken], CatalogSource]) -> None:
        self._source_factory = source_factory

    def fetch(self, reference: ResolvedReference, token: SessionToken) -> List[TrackRow]:
        """Track rows for ``reference``.

        Raises InvalidReference without any upstream call, UpstreamFetchFailed
        when Spotify errors (TokenRejected on 401).
        """
        if not reference.is_valid:
            raise InvalidReference(reference.raw)
        source = self._source_factory(token)
        try:
            if reference.kind is ReferenceKind.ALBUM:
                return flatten_album(source.get_album(reference.id))
            return flatten_playlist(source.get_playlist(reference.id))
        except SpotifyException as e:
            message = (e.msg or str(e)).strip()
            logger.info("Spotify %s for %s: %s", e.http_status, reference.uri, message)
            if e.http_status == 401:
                raise TokenRejected(message, status=401) from e
            raise UpstreamFetchFailed(message, status=e.http_status) from e
        except requests.RequestException as e:
            logger.warning("Spotify request failed for %s: %s", reference.uri, e)
            raise UpstreamFetchFailed(str(e)) from e
