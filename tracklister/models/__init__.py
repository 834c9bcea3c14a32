"""Data models for references, tracks, and session tokens."""
from tracklister.models.reference import ReferenceKind, ResolvedReference
from tracklister.models.token import AuthorizationRedirect, SessionToken
from tracklister.models.track import TrackRow

__all__ = [
    "AuthorizationRedirect",
    "ReferenceKind",
    "ResolvedReference",
    "SessionToken",
    "TrackRow",
]
