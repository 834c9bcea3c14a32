"""Error types raised by the core and mapped to responses by the HTTP layer."""


class TracklisterError(Exception):
    """Base class for request-scoped failures; none of them stop the server."""


class InvalidReference(TracklisterError):
    """User input did not resolve to a playlist or album."""


class AuthStateMismatch(TracklisterError):
    """Callback ``state`` does not match a pending authorization request."""


class TokenExchangeFailed(TracklisterError):
    """The authorization server did not hand out an access token."""


class AuthorizationDenied(TokenExchangeFailed):
    """The user (or Spotify) refused the authorization request."""


class AuthorizationUnavailable(TracklisterError):
    """No authorization URL can be built (missing or rejected client credentials)."""


class UpstreamFetchFailed(TracklisterError):
    """A catalog call failed after authentication; shown as a warning."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class TokenRejected(UpstreamFetchFailed):
    """Spotify refused the bearer token (expired or revoked)."""


class RenderFailed(TracklisterError):
    """A page template could not be rendered."""
