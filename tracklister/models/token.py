"""Session token and authorization redirect."""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class SessionToken:
    """Bearer token carried in the session cookie; never stored server-side."""
    access_token: str
    expires_at: Optional[datetime] = None
    token_type: str = "Bearer"

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(timezone.utc)) >= self.expires_at

    def seconds_left(self, now: Optional[datetime] = None) -> Optional[int]:
        if self.expires_at is None:
            return None
        delta = self.expires_at - (now or datetime.now(timezone.utc))
        return max(0, int(delta.total_seconds()))


@dataclass(frozen=True)
class AuthorizationRedirect:
    """Where to send a browser that has no token yet."""
    url: str
    state: str
