"""Dashboard API services

Each service owns a single concern; routers receive them through
the dependencies in ``core.dependencies``.
"""

from .auth_gate import AuthenticatedIdentity, AuthGate
from .discord_api import DiscordAPIClient
from .oauth import OAuthFlow, OAuthStage
from .session_store import AuthSession, SessionStore, StateStore

__all__ = [
    "AuthGate",
    "AuthSession",
    "AuthenticatedIdentity",
    "DiscordAPIClient",
    "OAuthFlow",
    "OAuthStage",
    "SessionStore",
    "StateStore",
]
