"""FastAPI application factory"""

import asyncio
import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dashbot.shared.database import DatabaseManager

from .core.config import Settings, get_settings
from .core.errors import AuthError, DashboardError
from .routers import activity_router, auth_router, commands_router, guilds_router, stats_router
from .routers.auth_router import clear_session_cookie
from .services import AuthGate, DiscordAPIClient, OAuthFlow, SessionStore, StateStore

logger = logging.getLogger(__name__)


async def _session_sweep_loop(sessions: SessionStore, interval: int) -> None:
    """Periodically drop expired and week-old sessions"""
    while True:
        await asyncio.sleep(interval)
        sessions.sweep()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle startup and shutdown"""
    settings: Settings = app.state.settings
    app.state.started_at = time.time()

    logger.info("Starting dashboard API server")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Dashboard URL: {settings.dashboard_url}")
    logger.info(f"Discord OAuth redirect: {settings.discord_redirect_uri}")

    sweep_task = asyncio.create_task(
        _session_sweep_loop(app.state.sessions, settings.session_sweep_interval)
    )

    yield

    logger.info("Shutting down dashboard API server")
    sweep_task.cancel()
    try:
        await app.state.discord_api.close()
    except Exception as e:
        logger.exception(f"Error during shutdown: {e}")


async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
    response = JSONResponse(status_code=401, content={"error": exc.code})
    if isinstance(exc, AuthError) and exc.clear_cookie:
        clear_session_cookie(response, request.app.state.settings)
    return response


def create_app(
    settings: Settings | None = None,
    *,
    bot: Any = None,
    db_manager: DatabaseManager | None = None,
    discord_api: DiscordAPIClient | None = None,
) -> FastAPI:
    """Create and configure FastAPI application

    ``bot`` is the running Discord client; the telemetry routes answer 503
    while it is missing or not ready.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="dashbot API",
        description="Dashboard API for the dashbot Discord bot",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/api/docs" if not settings.is_production else None,
        redoc_url=None,
    )

    sessions = SessionStore(max_age=settings.session_max_age)
    states = StateStore()
    discord_api = discord_api or DiscordAPIClient(
        client_id=settings.client_id,
        client_secret=settings.client_secret,
        redirect_uri=settings.discord_redirect_uri,
    )

    app.state.settings = settings
    app.state.bot = bot
    app.state.db_manager = db_manager
    app.state.discord_api = discord_api
    app.state.sessions = sessions
    app.state.states = states
    app.state.oauth = OAuthFlow(discord_api, sessions, states)
    app.state.auth_gate = AuthGate(sessions)
    app.state.started_at = time.time()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DashboardError, dashboard_error_handler)  # type: ignore[arg-type]

    app.include_router(auth_router.router)
    app.include_router(stats_router.router)
    app.include_router(guilds_router.router)
    app.include_router(commands_router.router)
    app.include_router(activity_router.router)

    @app.get("/api/health")
    async def health():
        """Liveness check, public"""
        ready = bot is not None and bot.is_ready()
        return {
            "status": "online" if ready else "offline",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.time() - app.state.started_at, 3),
        }

    @app.get("/api/status")
    async def status():
        """Readiness, including a database round trip"""
        db_ok = False
        if db_manager is not None and db_manager.is_connected:
            db_ok = await db_manager.check_health()
        return {
            "service": "dashbot-api",
            "uptime_seconds": int(time.time() - app.state.started_at),
            "bot_ready": bot is not None and bot.is_ready(),
            "db_connected": db_ok,
            "environment": settings.environment,
        }

    logger.info("FastAPI application configured")

    return app
