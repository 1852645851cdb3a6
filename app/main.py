"""
FACEIT Profile Proxy - Main FastAPI Application
Republishes FACEIT ELO/level as JSON or a plain-text chat line
"""
import logging
from typing import Optional, Callable
from datetime import datetime
from concurrent.futures import Executor
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from app.cache import ResponseCache
from app.errors import ProfileLookupError, ConfigurationMissing
from app.faceit_client import FaceitClient, describe_error
from app.profile import ProfileResolver, format_error, format_loading
from app.schemas import ProfileResponse, ErrorResponse, VersionResponse, CacheStatsResponse
from config.settings import Settings, settings as default_settings

# Version tracking
APP_VERSION = "v1.0.0"
APP_NAME = "FACEIT Profile Proxy"

logger = logging.getLogger("main")

TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"


def configure_logging(debug: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)


def _text(body: str, status_code: int = 200) -> PlainTextResponse:
    return PlainTextResponse(body, status_code=status_code, media_type=TEXT_MEDIA_TYPE)


def create_app(
    settings: Optional[Settings] = None,
    client: Optional[FaceitClient] = None,
    clock: Optional[Callable[[], float]] = None,
    now: Optional[Callable[[], datetime]] = None,
    executor: Optional[Executor] = None,
) -> FastAPI:
    """
    Build the application with its caches and resolvers.

    Args:
        settings: Configuration (module settings by default)
        client: FACEIT client (built from settings by default)
        clock: Cache clock in seconds, for tests
        now: Local wall clock for the "today" window, for tests
        executor: Runs background refreshes, for tests
    """
    settings = settings or default_settings
    configure_logging(settings.debug_faceit)

    client = client or FaceitClient(
        api_key=settings.faceit_key,
        base_url=settings.faceit_base_url,
        debug=settings.debug_faceit,
    )

    cache_kwargs = {"max_refresh_workers": settings.refresh_workers}
    if clock is not None:
        cache_kwargs["clock"] = clock
    if executor is not None:
        cache_kwargs["executor"] = executor
    resolver_kwargs = {"now": now} if now is not None else {}

    profile_cache = ResponseCache(ttl_seconds=settings.profile_cache_ttl_seconds, **cache_kwargs)
    elo_cache = ResponseCache(ttl_seconds=settings.elo_cache_ttl_seconds, **cache_kwargs)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        profile_cache.shutdown()
        elo_cache.shutdown()

    app = FastAPI(
        title=APP_NAME,
        description="FACEIT ELO and level for chat bots",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.client = client
    app.state.profile_resolver = ProfileResolver(
        client,
        profile_cache,
        timeout=settings.profile_timeout_seconds,
        include_history=True,
        history_limit=settings.history_limit,
        **resolver_kwargs,
    )
    app.state.elo_resolver = ProfileResolver(
        client,
        elo_cache,
        timeout=settings.elo_timeout_seconds,
        include_history=False,
        **resolver_kwargs,
    )

    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:
    default_game = app.state.settings.default_game

    @app.get("/health", response_class=PlainTextResponse)
    @app.get("/_botrix-test", response_class=PlainTextResponse, include_in_schema=False)
    def health_check():
        """Liveness check."""
        return _text("ok")

    @app.get("/version", response_model=VersionResponse)
    def version_info():
        """Version information endpoint."""
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "full": f"{APP_NAME} {APP_VERSION}",
        }

    @app.get("/cache/stats", response_model=CacheStatsResponse)
    def cache_stats(request: Request):
        """Get cache statistics."""
        return {
            "profile": request.app.state.profile_resolver.cache.get_stats(),
            "elo": request.app.state.elo_resolver.cache.get_stats(),
        }

    @app.get(
        "/profile/{nickname}",
        response_model=ProfileResponse,
        responses={500: {"model": ErrorResponse}},
    )
    @app.get("/faceit/{nickname}", response_model=ProfileResponse, include_in_schema=False)
    def get_profile(
        nickname: str,
        request: Request,
        game: str = Query(default_game, description="Game slug, e.g. cs2"),
        format: str = Query("json", description="json or text"),
    ):
        """
        Get a player's ELO, level and today's W/L.

        format=text returns a single chat line. Errors are fixed messages:
        200 for text so chat bots still print them, 500 for JSON.
        """
        game = (game or default_game).lower()
        as_text = (format or "json").lower() == "text"
        resolver: ProfileResolver = request.app.state.profile_resolver

        try:
            if not request.app.state.client.is_configured:
                raise ConfigurationMissing()
            result = resolver.lookup(nickname, game)
        except ConfigurationMissing as e:
            logger.error("FACEIT_KEY is not configured")
            if as_text:
                return _text(e.user_message)
            return JSONResponse(status_code=500, content={"error": e.user_message})
        except ProfileLookupError as e:
            logger.error(f"FACEIT fetch error: {describe_error(e)}")
            if as_text:
                return _text(format_error(e))
            return JSONResponse(status_code=500, content={"error": e.user_message})

        if as_text:
            return _text(result.text)
        return result.profile.to_dict()

    @app.get("/elo/{nickname}", response_class=PlainTextResponse)
    def get_elo(
        nickname: str,
        request: Request,
        game: str = Query(default_game, description="Game slug, e.g. cs2"),
    ):
        """
        Chat line from cache, never waiting on FACEIT.

        Each call schedules a background refresh; until the first one lands
        a loading placeholder is returned.
        """
        game = (game or default_game).lower()
        if not request.app.state.client.is_configured:
            return _text(ConfigurationMissing.user_message)

        resolver: ProfileResolver = request.app.state.elo_resolver
        cached = resolver.peek_and_refresh(nickname, game)
        if cached is None:
            return _text(format_loading(nickname))
        return _text(cached.text)


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=default_settings.port)
