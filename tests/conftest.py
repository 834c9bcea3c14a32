"""Shared fixtures: fake Spotify collaborators and an app wired to them."""
from typing import Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient
from spotipy.oauth2 import SpotifyOauthError

from tracklister.api.app import create_app
from tracklister.config import Settings
from tracklister.core.rate_gate import RateGate
from tracklister.models.token import SessionToken


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAuthorizer:
    """Stands in for SpotifyOAuth: code "good" yields a token, anything else fails."""

    def __init__(self) -> None:
        self.exchanged: List[str] = []

    def authorize_url(self, state: str) -> str:
        return f"https://accounts.spotify.com/authorize?client_id=client-id&response_type=code&state={state}"

    def exchange_code(self, code: str) -> dict:
        self.exchanged.append(code)
        if code != "good":
            raise SpotifyOauthError("error: invalid_grant, error_description: Invalid authorization code")
        return {"access_token": "access-123", "token_type": "Bearer", "expires_in": 3600}


class FakeCatalogSource:
    """Returns canned payloads by id; raise an exception by mapping an id to it."""

    def __init__(self, albums: Optional[Dict] = None, playlists: Optional[Dict] = None) -> None:
        self.albums = albums or {}
        self.playlists = playlists or {}
        self.calls: List[Tuple[str, str, str]] = []

    def __call__(self, token: SessionToken) -> "FakeCatalogSource":
        self.token = token
        return self

    def _get(self, table: Dict, kind: str, id_: str) -> dict:
        self.calls.append((kind, id_, self.token.access_token))
        value = table[id_]
        if isinstance(value, Exception):
            raise value
        return value

    def get_album(self, album_id: str) -> dict:
        return self._get(self.albums, "album", album_id)

    def get_playlist(self, playlist_id: str) -> dict:
        return self._get(self.playlists, "playlist", playlist_id)


def make_track(name: str, artist: str, number: int, track_id: str) -> dict:
    return {
        "id": track_id,
        "name": name,
        "artists": [{"id": f"artist-{artist}", "name": artist}],
        "duration_ms": 185000 + number,
        "track_number": number,
        "disc_number": 1,
        "explicit": False,
        "external_urls": {"spotify": f"https://open.spotify.com/track/{track_id}"},
    }


TRACKS = [
    make_track("Intro", "Band", 1, "t1"),
    make_track("Song Two", "Band", 2, "t2"),
]


def album_payload(tracks: List[dict]) -> dict:
    return {"id": "7yQ3jgoi8fLV4RnD83cqzo", "name": "Album", "tracks": {"items": tracks, "next": None}}


def playlist_payload(tracks: List[dict]) -> dict:
    items = []
    for t in tracks:
        full = dict(t, album={"name": "Album"}, popularity=10)
        items.append({"added_at": "2020-01-01T00:00:00Z", "track": full})
    return {"id": "6fCOzHcpq7P25OZC8Mikxr", "name": "Playlist", "tracks": {"items": items, "next": None}}


def state_from_location(location: str) -> str:
    return parse_qs(urlparse(location).query)["state"][0]


@pytest.fixture
def settings() -> Settings:
    return Settings(client_id="client-id", client_secret="client-secret")


@pytest.fixture
def authorizer() -> FakeAuthorizer:
    return FakeAuthorizer()


@pytest.fixture
def catalog() -> FakeCatalogSource:
    return FakeCatalogSource(
        albums={"7yQ3jgoi8fLV4RnD83cqzo": album_payload(TRACKS)},
        playlists={"6fCOzHcpq7P25OZC8Mikxr": playlist_payload(TRACKS)},
    )


@pytest.fixture
def app(settings, authorizer, catalog):
    return create_app(
        settings,
        authorizer=authorizer,
        catalog_source_factory=catalog,
        rate_gate=RateGate(rate=1000, burst=1000),
    )


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
