"""Dependency injection utilities for FastAPI

Services are created once by ``create_app`` and kept on ``app.state``;
these helpers hand them to the routes.
"""

import logging
from typing import Any

from fastapi import Cookie, HTTPException, Request

from dashbot.shared.repositories import ActivityRepository

from ..services import AuthenticatedIdentity, AuthGate, OAuthFlow, SessionStore
from .config import Settings

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session"


# ============================================
# Service Dependencies
# ============================================


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_oauth_flow(request: Request) -> OAuthFlow:
    return request.app.state.oauth


def get_auth_gate(request: Request) -> AuthGate:
    return request.app.state.auth_gate


def get_activity_repository(request: Request) -> ActivityRepository | None:
    """None when the bot runs without a database"""
    db_manager = request.app.state.db_manager
    if db_manager is None or not db_manager.is_connected:
        return None
    return ActivityRepository(db_manager.pool)


def get_bot(request: Request) -> Any:
    """The running Discord client, 503 until it is ready"""
    bot = request.app.state.bot
    if bot is None or not bot.is_ready():
        raise HTTPException(status_code=503, detail="Bot is not ready")
    return bot


# ============================================
# Authentication Dependencies
# ============================================


async def require_auth(
    request: Request,
    session: str | None = Cookie(None),
) -> AuthenticatedIdentity:
    """Validate the session cookie; AuthError becomes a 401 in the app handler"""
    gate: AuthGate = request.app.state.auth_gate
    identity = gate.authenticate(session)
    request.state.user = identity.user
    request.state.guilds = identity.guilds
    return identity
