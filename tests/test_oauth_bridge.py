from datetime import datetime, timedelta, timezone

import pytest
import requests

from conftest import FakeAuthorizer, state_from_location
from tracklister.config import Settings
from tracklister.core.oauth_bridge import OAuthBridge
from tracklister.core.state_store import StateStore
from spotipy.oauth2 import SpotifyOauthError

from tracklister.errors import (
    AuthorizationDenied,
    AuthorizationUnavailable,
    AuthStateMismatch,
    TokenExchangeFailed,
)
from tracklister.models.token import AuthorizationRedirect, SessionToken

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
SETTINGS = Settings(client_id="client-id", client_secret="client-secret")


@pytest.fixture
def store() -> StateStore:
    return StateStore(ttl=timedelta(minutes=10))


@pytest.fixture
def bridge(store, authorizer) -> OAuthBridge:
    return OAuthBridge(SETTINGS, store, authorizer, now_fn=lambda: NOW)


def test_missing_cookie_requires_redirect(bridge, store):
    for cookie in (None, "", "   "):
        result = bridge.ensure_token(cookie)
        assert isinstance(result, AuthorizationRedirect)
        assert result.url.startswith("https://accounts.spotify.com/authorize")
        assert state_from_location(result.url) == result.state
    assert store.count() == 3


def test_cookie_value_round_trips_unchanged(bridge):
    for value in ("V", "BQD-abc_123.xyz", "  padded  "):
        token = bridge.ensure_token(value)
        assert isinstance(token, SessionToken)
        assert token.access_token == value
        assert token.token_type == "Bearer"


def test_complete_authorization_exchanges_code(bridge, authorizer):
    redirect = bridge.authorization_url()

    token = bridge.complete_authorization({"code": "good", "state": redirect.state})

    assert token.access_token == "access-123"
    assert token.expires_at == NOW + timedelta(seconds=3600)
    assert authorizer.exchanged == ["good"]


def test_expires_at_from_token_info_wins(store):
    class Authorizer(FakeAuthorizer):
        def exchange_code(self, code):
            return {"access_token": "a", "expires_in": 3600, "expires_at": 1704114000}

    bridge = OAuthBridge(SETTINGS, store, Authorizer(), now_fn=lambda: NOW)
    token = bridge.complete_authorization({"code": "c", "state": bridge.authorization_url().state})
    assert token.expires_at == datetime.fromtimestamp(1704114000, tz=timezone.utc)


def test_state_mismatch_fails_before_exchange(bridge, authorizer):
    bridge.authorization_url()

    with pytest.raises(AuthStateMismatch):
        bridge.complete_authorization({"code": "good", "state": "abc123"})
    assert authorizer.exchanged == []


def test_state_cannot_be_replayed(bridge):
    state = bridge.authorization_url().state
    bridge.complete_authorization({"code": "good", "state": state})

    with pytest.raises(AuthStateMismatch):
        bridge.complete_authorization({"code": "good", "state": state})


def test_rejected_code_is_token_exchange_failure(bridge):
    state = bridge.authorization_url().state
    with pytest.raises(TokenExchangeFailed):
        bridge.complete_authorization({"code": "expired", "state": state})


def test_network_failure_is_token_exchange_failure(store):
    class Authorizer(FakeAuthorizer):
        def exchange_code(self, code):
            raise requests.ConnectionError("connection refused")

    bridge = OAuthBridge(SETTINGS, store, Authorizer())
    state = bridge.authorization_url().state
    with pytest.raises(TokenExchangeFailed, match="connection refused"):
        bridge.complete_authorization({"code": "good", "state": state})


def test_missing_code_is_token_exchange_failure(bridge, authorizer):
    state = bridge.authorization_url().state
    with pytest.raises(TokenExchangeFailed):
        bridge.complete_authorization({"state": state})
    assert authorizer.exchanged == []


def test_denied_authorization_burns_state(bridge, store):
    state = bridge.authorization_url().state
    with pytest.raises(AuthorizationDenied):
        bridge.complete_authorization({"error": "access_denied", "state": state})
    assert store.count() == 0


def test_error_with_forged_state_is_state_mismatch(bridge, store):
    bridge.authorization_url()

    with pytest.raises(AuthStateMismatch):
        bridge.complete_authorization({"error": "access_denied", "state": "forged"})
    assert store.count() == 1


def test_token_expired_on_arrival_is_rejected(store):
    class Authorizer(FakeAuthorizer):
        def exchange_code(self, code):
            return {"access_token": "a", "expires_at": int((NOW - timedelta(minutes=1)).timestamp())}

    bridge = OAuthBridge(SETTINGS, store, Authorizer(), now_fn=lambda: NOW)
    state = bridge.authorization_url().state
    with pytest.raises(TokenExchangeFailed, match="expired"):
        bridge.complete_authorization({"code": "good", "state": state})


def test_missing_credentials_make_authorization_unavailable(store, authorizer):
    bridge = OAuthBridge(Settings(), store, authorizer)

    with pytest.raises(AuthorizationUnavailable, match="not configured"):
        bridge.ensure_token(None)
    assert store.count() == 0


def test_rejected_client_config_makes_authorization_unavailable(store):
    class Authorizer(FakeAuthorizer):
        def authorize_url(self, state):
            raise SpotifyOauthError("No client_id. Pass it or set a SPOTIPY_CLIENT_ID environment variable.")

    bridge = OAuthBridge(SETTINGS, store, Authorizer())
    with pytest.raises(AuthorizationUnavailable, match="client_id"):
        bridge.authorization_url()
