"""Core services: rate gate, reference resolver, OAuth bridge, catalog dispatch."""
from tracklister.core.catalog import CatalogDispatcher
from tracklister.core.oauth_bridge import OAuthBridge
from tracklister.core.rate_gate import RateGate
from tracklister.core.resolver import resolve
from tracklister.core.state_store import StateStore

__all__ = ["CatalogDispatcher", "OAuthBridge", "RateGate", "StateStore", "resolve"]
