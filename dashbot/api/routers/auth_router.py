"""Authentication API routes"""

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Cookie, Depends, Response
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from dashbot.shared.models import DiscordGuild, DiscordUser

from ..core.config import Settings
from ..core.dependencies import (
    SESSION_COOKIE,
    get_app_settings,
    get_oauth_flow,
    get_session_store,
    require_auth,
)
from ..core.errors import DashboardError
from ..services import AuthenticatedIdentity, OAuthFlow, SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["authentication"])


# ============================================
# Response Models
# ============================================


class LoginResponse(BaseModel):
    authUrl: str


class MeResponse(BaseModel):
    user: DiscordUser
    guilds: list[DiscordGuild]


class LogoutResponse(BaseModel):
    success: bool


# ============================================
# Helpers
# ============================================


def error_redirect(settings: Settings, code: str) -> RedirectResponse:
    return RedirectResponse(url=f"{settings.dashboard_url}?{urlencode({'error': code})}")


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


# ============================================
# Endpoints
# ============================================


@router.get("/login", response_model=LoginResponse)
async def login(oauth: OAuthFlow = Depends(get_oauth_flow)) -> LoginResponse:
    """Get the Discord OAuth authorization URL"""
    return LoginResponse(authUrl=oauth.begin_login())


@router.get("/callback")
async def callback(
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    oauth: OAuthFlow = Depends(get_oauth_flow),
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    """Handle the Discord OAuth callback"""
    try:
        token, session = await oauth.handle_callback(code, state, error)
    except DashboardError as e:
        return error_redirect(settings, e.code)

    response = RedirectResponse(url=settings.dashboard_url)
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=settings.session_max_age,
    )

    logger.info(f"User logged in: {session.user.username} ({session.user.id})")
    return response


@router.get("/me", response_model=MeResponse)
async def me(identity: AuthenticatedIdentity = Depends(require_auth)) -> MeResponse:
    """Current user and their guilds"""
    return MeResponse(user=identity.user, guilds=identity.guilds)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    session: str | None = Cookie(None),
    sessions: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings),
) -> LogoutResponse:
    """Drop the session if there is one; always succeeds"""
    existing = sessions.get(session)
    if sessions.delete(session) and existing is not None:
        logger.info(f"User logged out: {existing.user.username} ({existing.user.id})")

    clear_session_cookie(response, settings)
    return LogoutResponse(success=True)
