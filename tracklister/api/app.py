"""FastAPI app factory: middleware, error pages, and route registration."""
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

from tracklister.api.middleware import AccessLogMiddleware, RateGateMiddleware
from tracklister.api.rendering import error_page, not_found_page
from tracklister.api.routes import auth, pages, search
from tracklister.api.state import AppState, get_state
from tracklister.config import Settings
from tracklister.core.catalog import CatalogSource
from tracklister.core.oauth_bridge import Authorizer
from tracklister.core.rate_gate import RateGate
from tracklister.core.state_store import StateStore
from tracklister.models.token import SessionToken

__all__ = ["create_app", "AppState", "get_state"]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    state: AppState = app.state.tracklister
    settings = state.settings
    if not settings.has_credentials:
        logger.warning("SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET not set; authorization will fail")
    logger.info(
        "Track lister ready (callback %s, rate %.1f/s burst %d)",
        settings.redirect_uri,
        state.rate_gate.rate,
        state.rate_gate.burst,
    )
    yield


async def _http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return not_found_page(request)
    return await http_exception_handler(request, exc)


async def _server_error(request: Request, exc: Exception):
    logger.error("server error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_page(request, str(exc))


def create_app(
    settings: Optional[Settings] = None,
    *,
    authorizer: Optional[Authorizer] = None,
    catalog_source_factory: Optional[Callable[[SessionToken], CatalogSource]] = None,
    rate_gate: Optional[RateGate] = None,
    state_store: Optional[StateStore] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    state = AppState(
        settings,
        authorizer=authorizer,
        catalog_source_factory=catalog_source_factory,
        rate_gate=rate_gate,
        state_store=state_store,
    )

    app = FastAPI(
        title="Track lister",
        description="List the tracks of a Spotify playlist or album",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.tracklister = state

    # Added last = outermost: the rate gate runs before the access logger
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RateGateMiddleware, gate=state.rate_gate)

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _server_error)

    app.include_router(pages.router, tags=["pages"])
    app.include_router(auth.router, tags=["auth"])
    app.include_router(search.router, tags=["search"])
    return app
