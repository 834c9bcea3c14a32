"""Shared application state (injected into routes)."""
from datetime import timedelta
from typing import Callable, Optional

from fastapi import Request

from tracklister.config import Settings
from tracklister.core.catalog import CatalogDispatcher, CatalogSource
from tracklister.core.oauth_bridge import Authorizer, OAuthBridge
from tracklister.core.rate_gate import RateGate
from tracklister.core.spotify_client import SpotipyAuthorizer, SpotipyCatalogSource
from tracklister.core.state_store import StateStore
from tracklister.models.token import SessionToken


class AppState:
    """Owns every long-lived component; one instance per app."""

    def __init__(
        self,
        settings: Settings,
        *,
        authorizer: Optional[Authorizer] = None,
        catalog_source_factory: Optional[Callable[[SessionToken], CatalogSource]] = None,
        rate_gate: Optional[RateGate] = None,
        state_store: Optional[StateStore] = None,
    ) -> None:
        self.settings = settings
        self.rate_gate = rate_gate or RateGate(settings.rate_limit, settings.rate_burst)
        self.state_store = state_store or StateStore(ttl=timedelta(seconds=settings.state_ttl))
        self.oauth_bridge = OAuthBridge(
            settings,
            self.state_store,
            authorizer or SpotipyAuthorizer(settings),
        )
        self.catalog = CatalogDispatcher(catalog_source_factory or self._spotipy_source)

    def _spotipy_source(self, token: SessionToken) -> CatalogSource:
        return SpotipyCatalogSource(
            token.access_token,
            timeout=self.settings.upstream_timeout,
            max_pages=self.settings.max_pages,
        )


def get_state(request: Request) -> AppState:
    return request.app.state.tracklister
