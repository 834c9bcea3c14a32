"""Configuration: env, Spotify credentials, rate limits, cookie settings."""
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of tracklister package)
BASE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

# Load .env from project root so SPOTIFY_CLIENT_ID etc. are set
load_dotenv(BASE_DIR / ".env")

DEFAULT_REDIRECT_URI = "http://localhost:8080/callback"
SPOTIFY_SCOPES = "user-read-private"
SESSION_COOKIE = "sp_token"


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    """Everything the app needs, read once at startup and passed to components."""
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = DEFAULT_REDIRECT_URI
    scopes: str = SPOTIFY_SCOPES
    host: str = "0.0.0.0"
    port: int = 8080
    rate_limit: float = 2.0
    rate_burst: int = 4
    upstream_timeout: float = 10.0
    max_pages: int = 10
    state_ttl: int = 600
    cookie_name: str = SESSION_COOKIE
    cookie_secure: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        # CALLBACK_URL is the older name for the redirect address
        redirect_uri = (
            os.getenv("SPOTIFY_REDIRECT_URI")
            or os.getenv("CALLBACK_URL")
            or DEFAULT_REDIRECT_URI
        )
        return cls(
            client_id=os.getenv("SPOTIFY_CLIENT_ID", ""),
            client_secret=os.getenv("SPOTIFY_CLIENT_SECRET", ""),
            redirect_uri=redirect_uri,
            host=os.getenv("TRACKLISTER_HOST", "0.0.0.0"),
            port=int(os.getenv("TRACKLISTER_PORT", "8080")),
            rate_limit=float(os.getenv("TRACKLISTER_RATE_LIMIT", "2")),
            rate_burst=int(os.getenv("TRACKLISTER_RATE_BURST", "4")),
            upstream_timeout=float(os.getenv("TRACKLISTER_UPSTREAM_TIMEOUT", "10")),
            max_pages=int(os.getenv("TRACKLISTER_MAX_PAGES", "10")),
            state_ttl=int(os.getenv("TRACKLISTER_STATE_TTL", "600")),
            cookie_secure=_env_flag("TRACKLISTER_COOKIE_SECURE"),
            log_level=os.getenv("TRACKLISTER_LOG_LEVEL", "INFO").upper(),
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)
